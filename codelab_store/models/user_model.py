# /codelab_store/models/user_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional

# --- Model Definitions ---

class EnvironmentBase(BaseModel):
    """
    The base model for a sandbox environment descriptor.
    """
    description: Optional[str] = Field(default="", description="Free-text description shown to the user.")
    instance: str = Field(..., description="Reference to the backing runtime instance.")

class EnvironmentCreate(EnvironmentBase):
    """The model used for adding an environment to a user's list."""
    environment: str = Field(..., min_length=1, description="Environment name, unique per user.")

class UserEnvironment(EnvironmentBase):
    """An environment descriptor as stored in a user's ordered environment list."""
    model_config = ConfigDict(from_attributes=True)

    environment: str

class PasswordChange(BaseModel):
    password: str = Field(..., min_length=1, description="The new plaintext password.")

class UserData(BaseModel):
    """
    The projected representation of a user returned by the user listing.
    Credentials are never part of this model.
    """
    id: str
    username: str
    groupNumber: Optional[int] = None
    role: Optional[str] = None
    courses: List[str] = Field(default_factory=list, description="IDs of the courses the user belongs to.")

class UserAccount(UserData):
    """The full account view, including the user's environment list."""
    environments: List[UserEnvironment] = Field(default_factory=list)
