"""
Locale routes and the per-request locale dependency
"""
from fastapi import APIRouter, HTTPException, Depends, Request, Response
import logging

from config import DEFAULT_LOCALE, LOCALE_COOKIE_NAME, LOCALE_COOKIE_MAX_AGE
from i18n import LocaleContext, LANGUAGES, UnsupportedLocaleError
from i18n.translations import normalize_locale
from models import LocaleUpdate, LocaleResponse
from services.errors import ServiceError
from utils import error_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/locale", tags=["locale"])

SERVICE_ERROR_STATUS = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "STORE_ERROR": 500,
}


def resolve_locale(request: Request) -> str:
    """Locale from `?lang=`, then the cookie, then Accept-Language, then the default."""
    requested = normalize_locale(request.query_params.get("lang"))
    if requested:
        return requested

    stored = normalize_locale(request.cookies.get(LOCALE_COOKIE_NAME))
    if stored:
        return stored

    for part in request.headers.get("accept-language", "").split(","):
        candidate = normalize_locale(part.split(";", 1)[0])
        if candidate:
            return candidate
    return DEFAULT_LOCALE


def get_locale_context(request: Request) -> LocaleContext:
    return LocaleContext({LOCALE_COOKIE_NAME: resolve_locale(request)})


def localized_error(status_code: int, code: str, message_key: str, locale: LocaleContext, details=None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=error_payload(code, locale.t(message_key), details)
    )


def service_http_error(error: ServiceError, locale: LocaleContext) -> HTTPException:
    """Map a service-layer error to a localized HTTP error."""
    status_code = SERVICE_ERROR_STATUS.get(error.code, 500)
    if status_code >= 500:
        logger.error(f"Service error {error.code}: {error.message}")
    return localized_error(status_code, error.code, error.message_key, locale, error.details or None)


def build_locale_response(locale: LocaleContext) -> LocaleResponse:
    return LocaleResponse(
        locale=locale.locale,
        lang=locale.document.lang,
        dir=locale.document.dir,
        is_rtl=locale.is_rtl,
        languages=LANGUAGES,
    )


@router.get("", response_model=LocaleResponse)
async def get_locale(locale: LocaleContext = Depends(get_locale_context)):
    return build_locale_response(locale)


@router.put("", response_model=LocaleResponse)
async def set_locale(
    data: LocaleUpdate,
    response: Response,
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        locale.set_locale(data.locale)
    except UnsupportedLocaleError as e:
        raise localized_error(400, "UNSUPPORTED_LOCALE", "errors.unsupportedLocale", locale, {"locale": e.code})

    response.set_cookie(
        key=LOCALE_COOKIE_NAME,
        value=locale.locale,
        max_age=LOCALE_COOKIE_MAX_AGE,
        samesite="lax",
        path="/",
    )
    return build_locale_response(locale)
