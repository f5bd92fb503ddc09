"""CLI entry point for the weather app."""

import argparse
import asyncio
import logging
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ValidationError

from weatherapp.config.defaults import DEFAULT_CONFIG_PATH
from weatherapp.config.loader import get_config_value, load_config, redacted, redacted_json
from weatherapp.config.schema import AppConfig
from weatherapp.errors import WeatherAppError
from weatherapp.ingest.location import StaticLocationProvider
from weatherapp.ingest.openweather_client import OpenWeatherClient
from weatherapp.models.common import Coordinates
from weatherapp.models.weather import LocationInfo
from weatherapp.pipeline.weather_service import WeatherService
from weatherapp.reporting import formatters

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherapp",
        description="Current weather, forecast and outfit advice",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG_PATH, help="Config YAML path"
    )
    parser.add_argument("--json", action="store_true", help="JSON output")
    parser.add_argument("-v", "--verbose", action="store_true", help="INFO logging")

    sub = parser.add_subparsers(dest="command")

    # current
    current_p = sub.add_parser("current", help="Current conditions")
    _add_location_args(current_p, allow_city=True)

    # forecast
    forecast_p = sub.add_parser("forecast", help="Hourly and daily forecast")
    _add_location_args(forecast_p, allow_city=True)

    # dashboard
    dash_p = sub.add_parser("dashboard", help="Conditions, forecast and outfit")
    _add_location_args(dash_p, allow_city=False)

    # search
    search_p = sub.add_parser("search", help="City name suggestions")
    search_p.add_argument("query")

    # config show / get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Get a config value")
    get_p.add_argument("key", help="Dotted key, e.g. forecast.hourly_count")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ValidationError as e:
        print(f"Error: invalid config {args.config}:\n{e}")
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else str(config.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "config":
        return _cmd_config(config, args)

    try:
        return asyncio.run(_dispatch(config, args))
    except WeatherAppError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e.message}")
        return 1


def _add_location_args(p: argparse.ArgumentParser, allow_city: bool) -> None:
    p.add_argument("--lat", type=float, help="Latitude")
    p.add_argument("--lon", type=float, help="Longitude")
    if allow_city:
        p.add_argument("--city", help="City name")
    p.add_argument(
        "--here", action="store_true", help="Use the configured device location"
    )


async def _dispatch(config: AppConfig, args) -> int:
    location_provider = StaticLocationProvider.from_config(config.location)
    async with OpenWeatherClient(config.provider, config.search) as client:
        service = WeatherService(client, location_provider, config.forecast)
        if args.command == "current":
            return await _cmd_current(service, args)
        elif args.command == "forecast":
            return await _cmd_forecast(service, config, args)
        elif args.command == "dashboard":
            return await _cmd_dashboard(service, config, args)
        elif args.command == "search":
            return await _cmd_search(service, args)
    return 1


def _location_hint(args) -> str:
    if hasattr(args, "city"):
        return "Specify --lat and --lon, --city, or --here"
    return "Specify --lat and --lon, or --here"


async def _resolve_coords(service: WeatherService, args) -> Coordinates:
    if args.lat is not None and args.lon is not None:
        return Coordinates(args.lat, args.lon)
    if getattr(args, "city", None):
        _, location = await service.city_weather(args.city)
        return location.coords
    if args.here:
        return await service.current_location()
    raise WeatherAppError(_location_hint(args))


async def _cmd_current(service: WeatherService, args) -> int:
    if args.city:
        conditions, location = await service.city_weather(args.city)
    elif args.lat is not None and args.lon is not None:
        coords = Coordinates(args.lat, args.lon)
        conditions = await service.client.get_weather_by_coords(coords.latitude, coords.longitude)
        location = LocationInfo(conditions.city_name, conditions.country, coords)
    elif args.here:
        conditions, location = await service.current_location_weather()
    else:
        raise WeatherAppError(_location_hint(args))

    if args.json:
        print(formatters.format_current_json(conditions, location))
    else:
        print(formatters.format_current_text(conditions, location))
    return 0


async def _cmd_forecast(service: WeatherService, config: AppConfig, args) -> int:
    coords = await _resolve_coords(service, args)
    view = await service.forecast_for(coords)
    if args.json:
        print(formatters.format_forecast_json(view, config.display.icon_url_template))
    else:
        print(formatters.format_forecast_text(view, ZoneInfo(config.display.timezone)))
    return 0


async def _cmd_dashboard(service: WeatherService, config: AppConfig, args) -> int:
    coords = await _resolve_coords(service, args)
    dash = await service.dashboard(coords)
    print(formatters.format_current_text(dash.conditions, dash.location))
    print(formatters.format_outfit_text(dash.outfit))
    print(formatters.format_forecast_text(dash.forecast, ZoneInfo(config.display.timezone)))
    return 0


async def _cmd_search(service: WeatherService, args) -> int:
    suggestions = await service.suggest_cities(args.query)
    print(formatters.format_suggestions_text(suggestions))
    return 0


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(redacted_json(config))
        return 0
    if args.config_command == "get":
        try:
            value = get_config_value(redacted(config), args.key)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            return 1
        if isinstance(value, BaseModel):
            print(value.model_dump_json(indent=2))
        else:
            print(value)
        return 0
    print("Use: config show | config get KEY")
    return 1
