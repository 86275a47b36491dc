from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Ecovira"

    # Pricing
    default_currency: str = "AUD"
    extras_pricing_file: str = ""  # JSON override for the built-in extras table

    # Demo bookings
    demo_mode_enabled: bool = True
    demo_departure_offset_hours: int = 72
    demo_flight_base_fare: float = 250.0
    demo_booking_store_limit: int = 1000  # created bookings kept for lookup

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
