from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_GIFT_FILE = "کتاب الکترونیکی فتوشاپ.pdf"
DEFAULT_BANNER_IMAGE = "https://picsum.photos/800/400"
DEFAULT_BANNER_TEXT = (
    "دوست من، با این لینک در مدرسه پولسازی فتوشاپ ثبت نام کن و کلی آموزش رایگان ببین!"
)
DEFAULT_SMS_TEXT = "ثبت نام شما در مدرسه پولسازی فتوشاپ با موفقیت انجام شد."


class AdminSettings(BaseModel):
    """Singleton bot settings, persisted with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    gift_file: str = Field(default=DEFAULT_GIFT_FILE, alias="giftFile")
    referral_banner_image: str = Field(default=DEFAULT_BANNER_IMAGE, alias="referralBannerImage")
    referral_banner_text: str = Field(default=DEFAULT_BANNER_TEXT, alias="referralBannerText")
    is_sms_active: bool = Field(default=False, alias="isSmsActive")
    sms_text: str = Field(default=DEFAULT_SMS_TEXT, alias="smsText")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)


class AdminSettingsUpdate(BaseModel):
    """Partial edit; only fields present in the request are written."""

    model_config = ConfigDict(populate_by_name=True)

    gift_file: Optional[str] = Field(default=None, alias="giftFile")
    referral_banner_image: Optional[str] = Field(default=None, alias="referralBannerImage")
    referral_banner_text: Optional[str] = Field(default=None, alias="referralBannerText")
    is_sms_active: Optional[bool] = Field(default=None, alias="isSmsActive")
    sms_text: Optional[str] = Field(default=None, alias="smsText")


class SettingFieldUpdate(BaseModel):
    value: str | bool
