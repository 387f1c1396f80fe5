from typing import Annotated, Literal

from pydantic import BaseModel, EmailStr, Field, RootModel

# ── Verification emails ───────────────────────────────────────────────────────


class _VerificationBase(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1, max_length=32)


class SignupEmail(_VerificationBase):
    type: Literal["signup"] = "signup"


class PasswordResetEmail(_VerificationBase):
    type: Literal["password_reset"] = "password_reset"


class EmailChangeEmail(_VerificationBase):
    type: Literal["email_change"] = "email_change"


VerificationEmail = Annotated[
    SignupEmail | PasswordResetEmail | EmailChangeEmail,
    Field(discriminator="type"),
]


class VerificationEmailRequest(RootModel[VerificationEmail]):
    """Request body tagged by `type`."""


# ── Notification emails ───────────────────────────────────────────────────────


class PromptCompletedData(BaseModel):
    original_prompt: str | None = Field(default=None, alias="originalPrompt")
    best_score: float | str | None = Field(default=None, alias="bestScore")
    app_url: str | None = Field(default=None, alias="appUrl")

    model_config = {"populate_by_name": True}


class WeeklyDigestData(BaseModel):
    prompts_count: int = Field(default=0, alias="promptsCount")
    templates_used: int = Field(default=0, alias="templatesUsed")
    avg_score: float | str | None = Field(default=None, alias="avgScore")
    app_url: str | None = Field(default=None, alias="appUrl")

    model_config = {"populate_by_name": True}


class NewFeaturesData(BaseModel):
    feature_description: str | None = Field(default=None, alias="featureDescription")
    features: list[str] = []
    app_url: str | None = Field(default=None, alias="appUrl")

    model_config = {"populate_by_name": True}


class _NotificationBase(BaseModel):
    email: EmailStr
    subject: str = Field(min_length=1, max_length=255)


class PromptCompletedEmail(_NotificationBase):
    type: Literal["prompt_completed"] = "prompt_completed"
    data: PromptCompletedData | None = None


class WeeklyDigestEmail(_NotificationBase):
    type: Literal["weekly_digest"] = "weekly_digest"
    data: WeeklyDigestData | None = None


class NewFeaturesEmail(_NotificationBase):
    type: Literal["new_features"] = "new_features"
    data: NewFeaturesData | None = None


NotificationEmail = Annotated[
    PromptCompletedEmail | WeeklyDigestEmail | NewFeaturesEmail,
    Field(discriminator="type"),
]


class NotificationEmailRequest(RootModel[NotificationEmail]):
    """Request body tagged by `type`."""


# ── Rendering / delivery ──────────────────────────────────────────────────────


class RenderedEmail(BaseModel):
    subject: str
    html: str


class EmailSendResponse(BaseModel):
    success: bool = True
    id: str | None = None
