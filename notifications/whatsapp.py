"""
WhatsApp deep links (wa.me). Nothing is sent from the server; staff open the
link and WhatsApp sends the prefilled text.
"""
import re
from urllib.parse import quote

from django.conf import settings

WA_ME_URL = 'https://wa.me/{phone}?text={text}'


def normalize_phone(phone, country_code=None) -> str:
    """
    Digits only, with the country code in front.
    01012345678 -> 201012345678; 1012345678 -> 201012345678.
    """
    country_code = country_code or settings.WHATSAPP_COUNTRY_CODE
    digits = re.sub(r'\D', '', phone or '')
    if digits.startswith('0'):
        digits = country_code + digits[1:]
    if not digits.startswith(country_code):
        digits = country_code + digits
    return digits


def build_whatsapp_link(phone, text) -> str:
    return WA_ME_URL.format(phone=normalize_phone(phone), text=quote(text, safe=''))
