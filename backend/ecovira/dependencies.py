"""Request-scoped access to the services built at startup."""

from fastapi import Request

from ecovira.data.extras_pricing import ExtrasPricing
from ecovira.services.demo_booking import DemoBookingFactory, DemoBookingRepository
from ecovira.services.quote_builder import QuoteBuilder


def get_extras_pricing(request: Request) -> ExtrasPricing:
    return request.app.state.extras_pricing


def get_quote_builder(request: Request) -> QuoteBuilder:
    return request.app.state.quote_builder


def get_demo_booking_factory(request: Request) -> DemoBookingFactory:
    return request.app.state.demo_booking_factory


def get_demo_booking_repository(request: Request) -> DemoBookingRepository:
    return request.app.state.demo_booking_repository
