# video_api/core/config.py
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "video_service"
    env: str = Field(default="local")

    mongo_dsn: str = Field(
        default="mongodb://mongo:27017/videos",
        alias="MONGO_DSN"
    )
    mongo_db: str = Field(default="videos", alias="MONGO_DB")

    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")
    sentry_test_enabled: bool = Field(default=False,
                                      alias="SENTRY_TEST_ENABLED")

    # OIDC provider (Auth0-style issuer ends with "/")
    auth_issuer: str = Field(default="https://example.auth0.com/",
                             alias="AUTH_ISSUER")
    auth_audience: str = Field(default="http://localhost:8080/",
                               alias="AUTH_AUDIENCE")
    auth_jwks_url: str = Field(default="", alias="AUTH_JWKS_URL")
    auth_userinfo_endpoint: str = Field(default="",
                                        alias="AUTH_USERINFO_ENDPOINT")
    auth_algorithms: list[str] = ["RS256"]
    userinfo_timeout: float = Field(default=5.0, alias="USERINFO_TIMEOUT")

    s3_bucket: str = Field(default="video-uploads", alias="S3_BUCKET")
    s3_region: str = Field(default="eu-north-1", alias="S3_REGION")
    s3_endpoint_url: str = Field(default="", alias="S3_ENDPOINT_URL")
    s3_access_key_id: str = Field(default="", alias="S3_ACCESS_KEY_ID")
    s3_secret_access_key: str = Field(default="",
                                      alias="S3_SECRET_ACCESS_KEY")
    s3_public_read: bool = Field(default=True, alias="S3_PUBLIC_READ")
    s3_public_base_url: str = Field(default="", alias="S3_PUBLIC_BASE_URL")

    model_config = SettingsConfigDict(env_file="infra/.env", extra="ignore")

    @property
    def jwks_url(self) -> str:
        return self.auth_jwks_url or f"{self.auth_issuer}.well-known/jwks.json"

    @property
    def userinfo_endpoint(self) -> str:
        return self.auth_userinfo_endpoint or f"{self.auth_issuer}userinfo"

    @property
    def public_base_url(self) -> str:
        if self.s3_public_base_url:
            return self.s3_public_base_url.rstrip("/")
        return f"https://{self.s3_bucket}.s3.{self.s3_region}.amazonaws.com"


settings = Settings()
