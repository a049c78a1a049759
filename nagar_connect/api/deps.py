"""
FastAPI providers for repositories, adapters and services.

Everything is built from Settings per request so tests can swap any piece
through app.dependency_overrides.
"""
from __future__ import annotations

from fastapi import Depends

from nagar_connect.core.config import Settings, get_settings
from nagar_connect.db import mongo
from nagar_connect.repositories.department_repository import DepartmentRepository
from nagar_connect.repositories.issue_repository import IssueRepository
from nagar_connect.repositories.user_repository import ProfileRepository, UserRepository
from nagar_connect.services.classifier import ImageClassifier
from nagar_connect.services.geocoding import GeocodingClient
from nagar_connect.services.intake import IssueIntakePipeline
from nagar_connect.services.issue_query import IssueQueryService
from nagar_connect.services.storage import MediaStorage
from nagar_connect.services.users_service import UserService


def get_issue_repository(db=Depends(mongo.get_db)) -> IssueRepository:
    return IssueRepository(db[mongo.ISSUES])


def get_user_repository(db=Depends(mongo.get_db)) -> UserRepository:
    return UserRepository(db[mongo.USERS])


def get_department_repository(db=Depends(mongo.get_db)) -> DepartmentRepository:
    return DepartmentRepository(db[mongo.DEPARTMENTS])


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
    db=Depends(mongo.get_db),
) -> UserService:
    profiles = {
        "citizen": ProfileRepository(db[mongo.CITIZEN_PROFILES]),
        "field_staff": ProfileRepository(db[mongo.FIELD_STAFF_PROFILES]),
        "ngo": ProfileRepository(db[mongo.NGO_PROFILES]),
    }
    return UserService(users, profiles)


def get_geocoder(settings: Settings = Depends(get_settings)) -> GeocodingClient:
    return GeocodingClient(settings)


def get_storage(settings: Settings = Depends(get_settings)) -> MediaStorage:
    return MediaStorage(settings)


def get_classifier(settings: Settings = Depends(get_settings)) -> ImageClassifier:
    return ImageClassifier(settings)


def get_intake_pipeline(
    geocoder: GeocodingClient = Depends(get_geocoder),
    issues: IssueRepository = Depends(get_issue_repository),
    settings: Settings = Depends(get_settings),
) -> IssueIntakePipeline:
    return IssueIntakePipeline(geocoder, issues, max_attachments=settings.max_attachments)


def get_query_service(
    issues: IssueRepository = Depends(get_issue_repository),
    users: UserRepository = Depends(get_user_repository),
    departments: DepartmentRepository = Depends(get_department_repository),
) -> IssueQueryService:
    return IssueQueryService(issues, users, departments)
