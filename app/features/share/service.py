# Share Feature - Service

from urllib.parse import quote

from app.core.logging import logger


WHATSAPP_URL = "https://wa.me/?text="

SHARE_MESSAGE = (
    "¡Hola! Aquí tienes el enlace al calendario de medicamentos de mamá "
    "para que puedas verlo y actualizarlo: {url}"
)


def build_share_message(page_url: str) -> str:
    return SHARE_MESSAGE.format(url=page_url)


def build_share_link(page_url: str) -> str:
    """
    Deep link that opens WhatsApp with the invitation prefilled.

    Args:
        page_url: Address of the calendar page

    Returns:
        wa.me link with the url-encoded message
    """
    encoded = quote(build_share_message(page_url), safe="!*'()")
    link = f"{WHATSAPP_URL}{encoded}"
    logger.debug(f"Built share link for {page_url}")
    return link
