"""Business settings and admin token definitions."""

from datetime import datetime

from pydantic import ConfigDict, Field

from booking.models.availability import RecordModel, new_id


class BusinessSettings(RecordModel):
    """Business profile plus the two notification switches."""

    model_config = ConfigDict(extra='ignore')

    business_name: str = ''
    business_phone: str = ''
    business_email: str = ''
    business_address: str = ''
    email_notifications: bool = False
    sms_notifications: bool = False


class AdminToken(RecordModel):
    token: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=datetime.now)
