"""Pydantic schema package for request and response models."""

from .common_schema import MessageResponse, ActionResponse
from .auth_schema import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdateRequest,
    PasswordChangeRequest,
    UserResponse,
    AuthResponse,
)
from .client_schema import ClientCreateRequest, ClientUpdateRequest, ClientResponse
from .measurement_schema import (
    MeasurementCreateRequest,
    MeasurementUpdateRequest,
    MeasurementResponse,
    MeasurementSummary,
)
from .diet_plan_schema import FoodItem, Meal, DietPlanCreateRequest, DietPlanUpdateRequest, DietPlanResponse
from .appointment_schema import AppointmentCreateRequest, AppointmentUpdateRequest, AppointmentResponse
from .activity_schema import ActivityResponse, ActivityListResponse, ActivityDeleteRequest, ActivityDeleteResponse
from .blog_schema import BlogArticleResponse
from .telegram_schema import (
    TelegramInitRequest,
    TelegramStatusResponse,
    SendMessageRequest,
    SendMessageResponse,
    ReferenceCodeResponse,
)
from .calculation_schema import (
    BMIResponse,
    CaloriesRequest,
    CaloriesResponse,
    MacrosRequest,
    MacrosResponse,
    BodyFatRequest,
    BodyFatResponse,
)
from .dashboard_schema import DashboardStats
from .upload_schema import UploadResponse

__all__ = [
    "MessageResponse",
    "ActionResponse",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdateRequest",
    "PasswordChangeRequest",
    "UserResponse",
    "AuthResponse",
    "ClientCreateRequest",
    "ClientUpdateRequest",
    "ClientResponse",
    "MeasurementCreateRequest",
    "MeasurementUpdateRequest",
    "MeasurementResponse",
    "MeasurementSummary",
    "FoodItem",
    "Meal",
    "DietPlanCreateRequest",
    "DietPlanUpdateRequest",
    "DietPlanResponse",
    "AppointmentCreateRequest",
    "AppointmentUpdateRequest",
    "AppointmentResponse",
    "ActivityResponse",
    "ActivityListResponse",
    "ActivityDeleteRequest",
    "ActivityDeleteResponse",
    "BlogArticleResponse",
    "TelegramInitRequest",
    "TelegramStatusResponse",
    "SendMessageRequest",
    "SendMessageResponse",
    "ReferenceCodeResponse",
    "BMIResponse",
    "CaloriesRequest",
    "CaloriesResponse",
    "MacrosRequest",
    "MacrosResponse",
    "BodyFatRequest",
    "BodyFatResponse",
    "DashboardStats",
    "UploadResponse",
]
