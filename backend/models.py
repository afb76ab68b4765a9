"""
Pydantic models for the App Store site API
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Literal
from datetime import datetime


class StoredModel(BaseModel):
    """Request bodies whose dump(by_alias=True) matches the stored camelCase fields."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Auth
# =============================================================================

class UserLogin(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    uid: str
    email: str
    display_name: Optional[str] = None
    role: str = "user"
    is_admin: bool = False
    created_at: Optional[str] = None
    last_login: Optional[str] = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse
    message: Optional[str] = None


# =============================================================================
# Locale
# =============================================================================

class LocaleUpdate(BaseModel):
    locale: str


class LocaleResponse(BaseModel):
    locale: str
    lang: str
    dir: str
    is_rtl: bool
    languages: List[dict]


# =============================================================================
# Apps
# =============================================================================

class AppCreate(StoredModel):
    name: str = ""
    description: str = ""
    short_description: str = ""
    version: str = ""
    download_url: str = ""
    image_url: str = ""
    icon_url: str = ""
    category: str = ""
    downloads: int = 0
    rating: float = 0.0
    size: str = ""
    screenshots: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    is_active: bool = True


class AppUpdate(StoredModel):
    name: Optional[str] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    version: Optional[str] = None
    download_url: Optional[str] = None
    image_url: Optional[str] = None
    icon_url: Optional[str] = None
    category: Optional[str] = None
    downloads: Optional[int] = None
    rating: Optional[float] = None
    size: Optional[str] = None
    screenshots: Optional[List[str]] = None
    features: Optional[List[str]] = None
    requirements: Optional[List[str]] = None


class AppActiveUpdate(BaseModel):
    is_active: bool


# =============================================================================
# Messages
# =============================================================================

class ContactMessageCreate(BaseModel):
    name: str = ""
    email: str = ""
    message: str = ""


class MessageReadUpdate(BaseModel):
    is_read: bool = True


class MessageReply(BaseModel):
    message: str = ""


# =============================================================================
# Site settings / maintenance
# =============================================================================

class SocialLinks(StoredModel):
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    youtube: Optional[str] = None


class SeoMeta(StoredModel):
    keywords: List[str] = Field(default_factory=list)
    author: str = ""
    og_image: str = ""


class SiteSettingsUpdate(StoredModel):
    site_name: Optional[str] = None
    site_description: Optional[str] = None
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    theme: Optional[Literal["light", "dark"]] = None
    social_links: Optional[SocialLinks] = None
    seo_meta: Optional[SeoMeta] = None


class MaintenanceToggle(BaseModel):
    end: Optional[datetime] = None
    message: Optional[str] = None


class MaintenanceUpdate(BaseModel):
    enabled: bool
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    message: Optional[str] = None


class MaintenanceStatus(BaseModel):
    maintenance_mode: bool = False
    maintenance_start: Optional[str] = None
    maintenance_end: Optional[str] = None
    message: str


class CountdownResponse(BaseModel):
    days: int
    hours: int
    minutes: int
    seconds: int
    progress: float
    elapsed: bool
    maintenance_mode: bool = False


# =============================================================================
# Dashboard
# =============================================================================

class ChartData(BaseModel):
    labels: List[str]
    downloads: List[int]
    visitors: List[int]


class DashboardStats(BaseModel):
    total_downloads: int = 0
    total_visitors: int = 0
    total_messages: int = 0
    total_apps: int = 0
    recent_downloads: int = 0
    recent_visitors: int = 0
    recent_messages: int = 0
    chart_data: Optional[ChartData] = None


class DashboardResponse(BaseModel):
    stats: Optional[DashboardStats] = None
    apps: List[dict] = Field(default_factory=list)
    messages: List[dict] = Field(default_factory=list)
    activity_logs: List[dict] = Field(default_factory=list)
    site_settings: Optional[dict] = None
    unread_count: int = 0
    errors: List[str] = Field(default_factory=list)


class HomeStats(BaseModel):
    total_downloads: int = 0
    total_apps: int = 0
    last_updated: str


class HomeResponse(BaseModel):
    apps: List[dict]
    stats: HomeStats
    fallback: bool = False
    notice: Optional[str] = None


class AboutResponse(BaseModel):
    id: str
    title: str
    content: str
    images: List[str] = Field(default_factory=list)
    is_published: bool = True
    updated_at: Optional[str] = None
    is_default: bool = False
