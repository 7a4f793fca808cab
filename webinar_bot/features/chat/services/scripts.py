from typing import List

from webinar_bot.platform.scheduling.timeline import Scheduled

WELCOME_MESSAGES = [
    "سلام! آماده‌ای که فتوشاپ رو یاد بگیری؟",
    "آماده‌ای که باهاش کسب درآمد کنی؟",
    "نه لازمه پول پرداخت کنی، نه لازمه کسی رو دعوت کنی.",
    "فقط عضو مدرسه پولسازی با فتوشاپ شو و هرچی که لازمه رو رایگان از استاد دریافت کن.",
]

NAME_PROMPT = "لطفا نام و نام خانوادگی خود را وارد کنید:"
PHONE_PROMPT = "لطفا شماره موبایل خود را وارد کنید:"

REGISTERED_MESSAGE = "ثبت نام شما با موفقیت انجام شد."
CHANNEL_MESSAGE = "از طریق لینک زیر می‌تونید وارد کانال مدرسه پولسازی با فتوشاپ شوید:"
GIFT_OFFER_MESSAGE = (
    "همچنین امروز یک هدیه ارزشمند برای شما در نظر گرفته‌ایم "
    "که می‌توانید روی دکمه زیر بزنید و دریافتش کنید."
)

GIFT_INSTRUCTIONS = (
    "برای دریافت هدیه، پست زیر که با لینک اختصاصی شما هست را به یک دوست علاقه‌مند به فتوشاپ "
    "ارسال کنید. پس از عضویت دوست شما از طریق این لینک، هدیه برای شما فعال می‌شود."
)


def welcome_script() -> List[Scheduled[str]]:
    # 500ms, then one every 1.5s
    return [Scheduled(text, index * 1500 + 500) for index, text in enumerate(WELCOME_MESSAGES)]


def form_script() -> List[Scheduled[str]]:
    return [Scheduled(NAME_PROMPT, 100), Scheduled(PHONE_PROMPT, 200)]


def success_script() -> List[Scheduled[str]]:
    return [
        Scheduled(REGISTERED_MESSAGE, 100),
        Scheduled(CHANNEL_MESSAGE, 1100),
        Scheduled(GIFT_OFFER_MESSAGE, 2100),
    ]
