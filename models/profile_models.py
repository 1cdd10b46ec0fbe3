"""
Profile store document models (Nightscout-style profile JSON).
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ProfileBlockModel(BaseModel):
    """
    Model for a single schedule block.
    """
    model_config = ConfigDict(extra="ignore")

    time: Optional[str] = Field(default=None, description="Block start as HH:MM")
    timeAsSeconds: Optional[int] = Field(default=None, description="Block start in seconds from midnight")
    value: float = Field(description="Value in effect from the block start")


class ProfileStoreEntry(BaseModel):
    """
    Model for one named profile inside a profile store.
    """
    model_config = ConfigDict(extra="ignore")

    units: Optional[str] = Field(default=None, description="Glucose units of sens and targets")
    basal: List[ProfileBlockModel] = Field(description="Basal rate blocks (U/h)")
    carbratio: List[ProfileBlockModel] = Field(description="Insulin-to-carb ratio blocks (g/U)")
    sens: List[ProfileBlockModel] = Field(description="Insulin sensitivity blocks")
    target_low: List[ProfileBlockModel] = Field(description="Low target blocks")
    target_high: List[ProfileBlockModel] = Field(description="High target blocks")


class ProfileStoreDocument(BaseModel):
    """
    Model for a profile store with a default profile name.
    """
    model_config = ConfigDict(extra="ignore")

    defaultProfile: Optional[str] = Field(default=None, description="Default profile name")
    units: Optional[str] = Field(default=None, description="Store-level glucose units")
    store: Dict[str, ProfileStoreEntry] = Field(description="Profiles by name")
