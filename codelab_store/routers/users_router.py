# /codelab_store/routers/users_router.py

"""
This module defines the API for user accounts and their sandbox environments.

Account creation and deletion are handled elsewhere; this router only reads
accounts and edits the parts of them that this service owns.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Response
from typing import List

from ..models import user_model
from ..services import account_service, database_service

router = APIRouter()

# --- USER COLLECTION ENDPOINTS (/api/users) ---

@router.get("", response_model=List[user_model.UserData], summary="List All Users")
def get_all_users(db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return db.get_all_users()

# --- INDIVIDUAL USER ENDPOINTS (/api/users/{username}) ---

@router.get("/{username}", response_model=user_model.UserAccount, summary="Get a User Account")
def get_user_account(username: str, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    account = db.get_user_account(username)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {username} not found")
    return account

@router.put("/{username}/password", status_code=status.HTTP_204_NO_CONTENT, summary="Change a User's Password")
def change_password(username: str, password_change: user_model.PasswordChange, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    changed = account_service.change_user_password(username=username, new_password=password_change.password, db=db)
    if not changed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {username} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# --- ENVIRONMENT SUB-RESOURCE ENDPOINTS ---

@router.get("/{username}/environments", response_model=List[user_model.UserEnvironment], summary="List a User's Environments")
def get_user_environments(username: str, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return db.get_user_environments(username)

@router.post("/{username}/environments", status_code=status.HTTP_204_NO_CONTENT, summary="Add an Environment")
def add_user_environment(username: str, env_create: user_model.EnvironmentCreate, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    # Adding a name the user already has is accepted and changes nothing.
    db.add_user_environment(username, env_create.environment, env_create.description, env_create.instance)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.delete("/{username}/environments/{environment}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove an Environment")
def remove_user_environment(username: str, environment: str, db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    db.remove_user_environment(username, environment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
