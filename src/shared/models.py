from datetime import datetime, timezone
from typing import Annotated, ClassVar, Literal, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field, model_validator

Role = Literal["ADMIN", "EDITOR"]
SponsorTier = Literal["GOLD", "SILVER", "COMMUNITY", "COMMUNITY_EXHIBITOR"]
SessionType = Literal["keynote", "session", "break", "networking"]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Stored as UTC so timestamps compare and sort consistently
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class PartialUpdate(BaseModel):
    """
    Base for PUT bodies. Only fields present in the request are written:
    an omitted field is left untouched, an explicit null clears it.
    Fields listed in ``non_nullable`` are required on the record and may be
    omitted but never nulled.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


# ── Auth / users ──────────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserCreate(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Role = "EDITOR"
    avatar: Optional[str] = None


class UserUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "email", "role", "password")

    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[Role] = None
    avatar: Optional[str] = None


# ── Years ─────────────────────────────────────────────────────────────────────

class YearCreate(BaseModel):
    name: str = Field(min_length=1)


# ── Speakers ──────────────────────────────────────────────────────────────────

class SpeakerCreate(BaseModel):
    yearId: str
    name: str = Field(min_length=1)
    title: Optional[str] = None
    bio: Optional[str] = None
    photoUrl: Optional[str] = None
    keyNote: bool = False


class SpeakerUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "keyNote")

    name: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = None
    bio: Optional[str] = None
    photoUrl: Optional[str] = None
    keyNote: Optional[bool] = None


# ── Agenda ────────────────────────────────────────────────────────────────────

class AgendaCreate(BaseModel):
    yearId: str
    titleEn: str = Field(min_length=1)
    titleFr: Optional[str] = None
    descriptionEn: Optional[str] = None
    descriptionFr: Optional[str] = None
    startTime: UtcDatetime
    endTime: UtcDatetime
    speakerId: Optional[str] = None
    location: Optional[str] = None
    type: SessionType = "session"
    published: bool = False

    @model_validator(mode="after")
    def fill_translations(self):
        if self.endTime <= self.startTime:
            raise ValueError("endTime must be after startTime")
        # French copy falls back to English until a translation is provided
        if not self.titleFr:
            self.titleFr = self.titleEn
        if not self.descriptionFr:
            self.descriptionFr = self.descriptionEn
        return self


class AgendaUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("titleEn", "startTime", "endTime", "type", "published")

    titleEn: Optional[str] = Field(default=None, min_length=1)
    titleFr: Optional[str] = None
    descriptionEn: Optional[str] = None
    descriptionFr: Optional[str] = None
    startTime: Optional[UtcDatetime] = None
    endTime: Optional[UtcDatetime] = None
    speakerId: Optional[str] = None
    location: Optional[str] = None
    type: Optional[SessionType] = None
    published: Optional[bool] = None

    @model_validator(mode="after")
    def check_times(self):
        if self.startTime and self.endTime and self.endTime <= self.startTime:
            raise ValueError("endTime must be after startTime")
        return self


# ── Sponsors ──────────────────────────────────────────────────────────────────

class SponsorCreate(BaseModel):
    yearId: str
    name: str = Field(min_length=1)
    type: SponsorTier
    website: Optional[str] = None
    logoUrl: Optional[str] = None


class SponsorUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "type")

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[SponsorTier] = None
    website: Optional[str] = None
    logoUrl: Optional[str] = None


# ── Organizers & volunteers ───────────────────────────────────────────────────

class OrganizerCreate(BaseModel):
    yearId: str
    name: str = Field(min_length=1)
    affiliation: str = Field(min_length=1)
    role: str = Field(min_length=1)
    photoUrl: Optional[str] = None


class OrganizerUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "affiliation", "role")

    name: Optional[str] = Field(default=None, min_length=1)
    affiliation: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = Field(default=None, min_length=1)
    photoUrl: Optional[str] = None


class VolunteerCreate(BaseModel):
    yearId: str
    name: str = Field(min_length=1)
    role: str = Field(min_length=1)
    photoUrl: Optional[str] = None


class VolunteerUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "role")

    name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[str] = Field(default=None, min_length=1)
    photoUrl: Optional[str] = None


# ── Gallery ───────────────────────────────────────────────────────────────────

class GalleryImageCreate(BaseModel):
    yearId: str
    imageUrl: str = Field(min_length=1)
    caption: Optional[str] = None
    category: Optional[str] = None


class GalleryImageUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("imageUrl",)

    imageUrl: Optional[str] = Field(default=None, min_length=1)
    caption: Optional[str] = None
    category: Optional[str] = None


# ── One-per-year records ──────────────────────────────────────────────────────
# PUT bodies carry yearId alongside the fields; it selects the record and is
# never written as a change.

class VenueCreate(BaseModel):
    yearId: str
    name: str = Field(min_length=1)
    city: str = Field(min_length=1)
    region: str = Field(min_length=1)
    address: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    mapUrl: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    website: Optional[str] = None
    contactInfo: Optional[str] = None
    images: list[str] = []


class VenueUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("name", "city", "region", "images")

    yearId: str
    name: Optional[str] = Field(default=None, min_length=1)
    city: Optional[str] = Field(default=None, min_length=1)
    region: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    mapUrl: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    website: Optional[str] = None
    contactInfo: Optional[str] = None
    images: Optional[list[str]] = None


class ContactCreate(BaseModel):
    yearId: str
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    twitterLink: Optional[str] = None
    facebookLink: Optional[str] = None
    instagramLink: Optional[str] = None
    linkedinLink: Optional[str] = None


class ContactUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple[str, ...]] = ("email",)

    yearId: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    twitterLink: Optional[str] = None
    facebookLink: Optional[str] = None
    instagramLink: Optional[str] = None
    linkedinLink: Optional[str] = None


class SettingsCreate(BaseModel):
    yearId: str
    rsvpLink: Optional[str] = None
    rsvpDeadline: Optional[UtcDatetime] = None
    eventDate: Optional[UtcDatetime] = None
    maxAttendees: Optional[int] = Field(default=None, ge=1)
    volunteerLink: Optional[str] = None
    sponsorLink: Optional[str] = None
    speakerLink: Optional[str] = None


class SettingsUpdate(PartialUpdate):
    yearId: str
    rsvpLink: Optional[str] = None
    rsvpDeadline: Optional[UtcDatetime] = None
    eventDate: Optional[UtcDatetime] = None
    maxAttendees: Optional[int] = Field(default=None, ge=1)
    volunteerLink: Optional[str] = None
    sponsorLink: Optional[str] = None
    speakerLink: Optional[str] = None


# ── Upload ────────────────────────────────────────────────────────────────────

class UploadResponse(BaseModel):
    url: str      # public URL; store in photoUrl / logoUrl / imageUrl
    key: str      # full S3 object key
