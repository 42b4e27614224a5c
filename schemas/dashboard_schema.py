"""Schemas for dashboard statistics."""

from pydantic import BaseModel


class DashboardStats(BaseModel):
    active_clients: int
    today_appointments: int
    active_diet_plans: int
    telegram_messages: int
    weight_goal_achieved: int

