"""Validated settings categories.

The backend stores settings as free-form JSON keyed by name. Every value is
validated here, once, at the read boundary: defaults are filled in and a
payload with an unexpected shape raises :class:`SettingsValidationError`
instead of leaking half-populated data into the rest of the application.
Stored payloads use camelCase keys; the models expose snake_case attributes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .client import ApiClient
from .errors import SettingsValidationError
from .numbering import DocumentType, NumberingSettings, default_settings

LOGGER = logging.getLogger("invoicekit.settings")


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=True,
    )


class GeneralSettings(_SettingsModel):
    company_name: str = ""
    default_currency: str = Field("USD", min_length=3, max_length=3)
    date_format: str = "MM/DD/YYYY"
    time_format: Literal["12h", "24h"] = "12h"
    first_day_of_week: int = Field(0, ge=0, le=6)
    timezone: str = "UTC"
    language: str = "en"
    auto_save: bool = True
    auto_save_interval: int = Field(5, ge=1)


class AppearanceSettings(_SettingsModel):
    theme: Literal["light", "dark", "system"] = "system"
    primary_color: str = "#3b82f6"
    accent_color: str = "#8b5cf6"
    font_size: Literal["small", "medium", "large"] = "medium"
    compact_mode: bool = False
    animations: bool = True


class CurrencySettings(_SettingsModel):
    currency: str = Field("USD", min_length=3, max_length=3)
    symbol_position: Literal["before", "after"] = "before"
    decimal_places: int = Field(2, ge=0, le=4)
    thousands_separator: Literal[",", ".", " ", "none"] = ","
    decimal_separator: Literal[".", ","] = "."


class NumberingSettingsSchema(_SettingsModel):
    prefix: str = Field("INV", max_length=10)
    start_number: int = Field(1, ge=0)
    padding_length: int = Field(4, ge=1, le=12)
    include_year: bool = True
    reset_on_new_year: bool = True

    def to_numbering(self) -> NumberingSettings:
        return NumberingSettings(
            prefix=self.prefix,
            start_number=self.start_number,
            padding_length=self.padding_length,
            include_year=self.include_year,
            reset_on_new_year=self.reset_on_new_year,
        )

    @classmethod
    def from_numbering(cls, settings: NumberingSettings) -> "NumberingSettingsSchema":
        try:
            return cls.model_validate(asdict(settings))
        except ValidationError as exc:
            raise SettingsValidationError("numbering", str(exc)) from exc


class TaxRate(_SettingsModel):
    id: str
    name: str
    rate: float = Field(ge=0, le=100)
    is_default: bool = False


class TaxSettings(_SettingsModel):
    rates: list[TaxRate] = Field(default_factory=list)
    default_rate_id: str | None = None
    tax_inclusive_pricing: bool = False
    show_tax_breakdown: bool = True

    def default_rate(self) -> TaxRate | None:
        """Return the rate selected by ``default_rate_id`` or flagged default."""

        for rate in self.rates:
            if self.default_rate_id is not None and rate.id == self.default_rate_id:
                return rate
        return next((rate for rate in self.rates if rate.is_default), None)


class ShippingRate(_SettingsModel):
    id: str
    name: str
    amount: float = Field(ge=0)
    is_default: bool = False


class ShippingSettings(_SettingsModel):
    rates: list[ShippingRate] = Field(default_factory=list)
    default_rate_id: str | None = None
    free_shipping_threshold: float | None = Field(None, ge=0)
    enable_shipping: bool = False

    def default_rate(self) -> ShippingRate | None:
        for rate in self.rates:
            if self.default_rate_id is not None and rate.id == self.default_rate_id:
                return rate
        return next((rate for rate in self.rates if rate.is_default), None)


class EmailSettings(_SettingsModel):
    smtp_host: str = ""
    smtp_port: int = Field(587, ge=1, le=65535)
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_secure: Literal["tls", "ssl", "none"] = "tls"
    from_email: str = ""
    from_name: str = ""
    reply_to_email: str = ""
    is_enabled: bool = False


class NotificationSettings(_SettingsModel):
    show_toast_notifications: bool = True
    show_success_toasts: bool = True
    show_error_toasts: bool = True
    show_warning_toasts: bool = True
    show_info_toasts: bool = True
    toast_duration: int = Field(4000, ge=0)
    toast_position: Literal[
        "top-left", "top-right", "bottom-left", "bottom-right", "top-center", "bottom-center"
    ] = "bottom-right"


_PUBLISHABLE_KEY = re.compile(r"^pk_(test_|live_)")
_SECRET_KEY = re.compile(r"^sk_(test_|live_)")


class StripeSettings(_SettingsModel):
    is_enabled: bool = False
    test_mode: bool = True
    publishable_key: str = ""
    secret_key: str = ""
    webhook_secret: str = ""
    webhook_endpoint: str = ""
    account_id: str | None = None
    account_name: str | None = None

    @field_validator("publishable_key")
    @classmethod
    def _check_publishable_key(cls, value: str) -> str:
        if value and not _PUBLISHABLE_KEY.match(value):
            raise ValueError("Invalid publishable key format")
        return value

    @field_validator("secret_key")
    @classmethod
    def _check_secret_key(cls, value: str) -> str:
        if value and not _SECRET_KEY.match(value):
            raise ValueError("Invalid secret key format")
        return value


class CompanyDetails(_SettingsModel):
    company_name: str = ""
    owner_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    website: str | None = None
    tax_id: str | None = None


SETTINGS_SCHEMAS: Mapping[str, type[_SettingsModel]] = {
    "general": GeneralSettings,
    "appearance": AppearanceSettings,
    "currency": CurrencySettings,
    "numbering": NumberingSettingsSchema,
    "tax": TaxSettings,
    "shipping": ShippingSettings,
    "email": EmailSettings,
    "notifications": NotificationSettings,
    "stripe": StripeSettings,
    "company": CompanyDetails,
}

# setting key -> (storage category, schema category)
SETTINGS_KEYS: Mapping[str, tuple[str, str]] = {
    "general_settings": ("general", "general"),
    "appearance_settings": ("appearance", "appearance"),
    "currency_format_settings": ("general", "currency"),
    "tax_settings": ("tax", "tax"),
    "shipping_settings": ("shipping", "shipping"),
    "email_settings": ("email", "email"),
    "notification_settings": ("notifications", "notifications"),
    "stripe_settings": ("integrations", "stripe"),
    "company_settings": ("company", "company"),
    "invoice_numbering_settings": ("general", "numbering"),
    "expense_numbering_settings": ("general", "numbering"),
    "payment_numbering_settings": ("general", "numbering"),
}


def parse_settings(category: str, raw: Any) -> _SettingsModel:
    """Validate ``raw`` against the schema of ``category``.

    ``None`` means nothing has been stored yet and yields the defaults.
    """

    schema = SETTINGS_SCHEMAS.get(category)
    if schema is None:
        raise SettingsValidationError(category, "unknown settings category")
    if raw is None:
        return schema()
    if not isinstance(raw, Mapping):
        raise SettingsValidationError(category, f"expected an object, got {type(raw).__name__}")
    try:
        return schema.model_validate(dict(raw))
    except ValidationError as exc:
        raise SettingsValidationError(category, str(exc)) from exc


def dump_settings(settings: _SettingsModel) -> dict[str, Any]:
    """Serialise ``settings`` with the camelCase keys used in storage."""

    return settings.model_dump(by_alias=True)


def load_settings(client: ApiClient, key: str) -> _SettingsModel:
    """Fetch and validate the setting stored under ``key``."""

    try:
        _storage_category, schema_category = SETTINGS_KEYS[key]
    except KeyError:
        raise SettingsValidationError(key, "unknown settings key") from None
    return parse_settings(schema_category, client.get_setting(key))


def save_settings(client: ApiClient, key: str, settings: _SettingsModel) -> None:
    try:
        storage_category, _schema_category = SETTINGS_KEYS[key]
    except KeyError:
        raise SettingsValidationError(key, "unknown settings key") from None
    client.set_setting(key, dump_settings(settings), storage_category)


def numbering_key(document_type: DocumentType) -> str:
    return f"{document_type}_numbering_settings"


def load_numbering_settings(client: ApiClient, document_type: DocumentType) -> NumberingSettings:
    """Return the numbering scheme for ``document_type`` with defaults applied.

    Fields missing from the stored payload take the document type defaults
    (``INV``, ``EXP`` or ``PAY`` prefixes).
    """

    defaults = NumberingSettingsSchema.from_numbering(default_settings(document_type))
    raw = client.get_setting(numbering_key(document_type))
    if raw is None:
        return defaults.to_numbering()
    if not isinstance(raw, Mapping):
        raise SettingsValidationError("numbering", f"expected an object, got {type(raw).__name__}")

    merged = {**dump_settings(defaults), **dict(raw)}
    try:
        parsed = NumberingSettingsSchema.model_validate(merged)
    except ValidationError as exc:
        raise SettingsValidationError("numbering", str(exc)) from exc
    return parsed.to_numbering()


def save_numbering_settings(
    client: ApiClient, document_type: DocumentType, settings: NumberingSettings
) -> None:
    schema = NumberingSettingsSchema.from_numbering(settings)
    client.set_setting(numbering_key(document_type), dump_settings(schema), "general")
    LOGGER.info("Numbering settings for %s saved", document_type)


@dataclass
class EmailConfigStatus:
    """Whether outgoing e-mail is usable with the stored configuration."""

    is_configured: bool
    is_enabled: bool
    missing_fields: list[str] = field(default_factory=list)

    @property
    def can_send_emails(self) -> bool:
        return self.is_configured and self.is_enabled and not self.missing_fields


_REQUIRED_EMAIL_FIELDS = (
    ("smtp_host", "SMTP Host"),
    ("smtp_port", "SMTP Port"),
    ("smtp_username", "SMTP Username"),
    ("smtp_password", "SMTP Password"),
    ("from_email", "From Email"),
)


def email_config_status(settings: EmailSettings | None) -> EmailConfigStatus:
    if settings is None:
        return EmailConfigStatus(False, False, ["All email settings"])
    if not settings.is_enabled:
        return EmailConfigStatus(True, False)

    missing = []
    for attribute, label in _REQUIRED_EMAIL_FIELDS:
        value = getattr(settings, attribute)
        if not value or (isinstance(value, str) and not value.strip()):
            missing.append(label)
    return EmailConfigStatus(not missing, True, missing)


__all__ = [
    "AppearanceSettings",
    "CompanyDetails",
    "CurrencySettings",
    "EmailConfigStatus",
    "EmailSettings",
    "GeneralSettings",
    "NotificationSettings",
    "NumberingSettingsSchema",
    "SETTINGS_KEYS",
    "SETTINGS_SCHEMAS",
    "ShippingRate",
    "ShippingSettings",
    "StripeSettings",
    "TaxRate",
    "TaxSettings",
    "dump_settings",
    "email_config_status",
    "load_numbering_settings",
    "load_settings",
    "numbering_key",
    "parse_settings",
    "save_numbering_settings",
    "save_settings",
]
