import pytest
from fastapi import HTTPException

from webinar_bot.features.bot_settings.schemas.settings import (
    DEFAULT_BANNER_IMAGE,
    DEFAULT_GIFT_FILE,
    AdminSettings,
    AdminSettingsUpdate,
)
from webinar_bot.features.bot_settings.services.settings_repository import SettingsRepository
from webinar_bot.platform.storage.memory import InMemoryStore


@pytest.fixture
def repo(store):
    return SettingsRepository(store)


@pytest.mark.asyncio
async def test_defaults_on_first_read(repo):
    current = await repo.get()

    assert current == AdminSettings()
    assert current.gift_file == DEFAULT_GIFT_FILE
    assert current.referral_banner_image == DEFAULT_BANNER_IMAGE
    assert current.is_sms_active is False


@pytest.mark.asyncio
async def test_malformed_settings_fall_back_to_defaults():
    repo = SettingsRepository(InMemoryStore({"webinar-settings": '{"isSmsActive": "maybe"}'}))
    assert await repo.get() == AdminSettings()


@pytest.mark.asyncio
async def test_partial_record_fills_missing_fields_with_defaults():
    repo = SettingsRepository(InMemoryStore({"webinar-settings": '{"smsText": "hi"}'}))
    current = await repo.get()

    assert current.sms_text == "hi"
    assert current.gift_file == DEFAULT_GIFT_FILE


@pytest.mark.asyncio
async def test_banner_text_edit_touches_nothing_else(repo):
    await repo.update_field("referralBannerImage", "https://example.com/banner.png")
    await repo.update_field("isSmsActive", True)
    await repo.update_field("smsText", "welcome!")
    before = await repo.get()

    after = await repo.update_field("referralBannerText", "new banner text")

    assert after.referral_banner_text == "new banner text"
    assert after.referral_banner_image == before.referral_banner_image
    assert after.is_sms_active == before.is_sms_active
    assert after.sms_text == before.sms_text
    assert after.gift_file == before.gift_file


@pytest.mark.asyncio
async def test_edits_are_idempotent(repo):
    once = await repo.update_field("referralBannerText", "same")
    twice = await repo.update_field("referralBannerText", "same")
    assert once == twice == await repo.get()


@pytest.mark.asyncio
async def test_edit_is_persisted_immediately(repo, store):
    await repo.update_field("smsText", "ثبت نام انجام شد")

    raw = await store.read("webinar-settings", None)
    assert raw["smsText"] == "ثبت نام انجام شد"
    assert set(raw) == {
        "giftFile",
        "referralBannerImage",
        "referralBannerText",
        "isSmsActive",
        "smsText",
    }


@pytest.mark.asyncio
async def test_python_field_names_are_accepted(repo):
    updated = await repo.update_field("gift_file", "guide.pdf")
    assert updated.gift_file == "guide.pdf"


@pytest.mark.asyncio
async def test_unknown_field_is_rejected(repo):
    with pytest.raises(HTTPException) as exc_info:
        await repo.update_field("adminPassword", "x")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_wrongly_typed_value_is_rejected(repo, store):
    with pytest.raises(HTTPException) as exc_info:
        await repo.update_field("isSmsActive", "definitely")
    assert exc_info.value.status_code == 422
    assert await store.read("webinar-settings", None) is None


@pytest.mark.asyncio
async def test_apply_update_only_writes_given_fields(repo):
    await repo.update_field("smsText", "keep me")

    updated = await repo.apply_update(AdminSettingsUpdate(referralBannerText="changed"))

    assert updated.referral_banner_text == "changed"
    assert updated.sms_text == "keep me"


@pytest.mark.asyncio
async def test_empty_update_is_a_no_op(repo, store):
    await repo.apply_update(AdminSettingsUpdate())
    assert await store.read("webinar-settings", None) is None
