"""Signal Detection Lambda Handler.

Fetches candles for a symbol, evaluates the requested indicators and
returns their signals. Indicator failures never abort the batch; they are
listed next to the signals and turn the status into 207.
"""

import json
import time
from typing import Any

from src.modules.data.manager import PriceDataManager
from src.modules.data.protocols import ProviderError
from src.modules.data.providers.binance import BinanceFuturesProvider
from src.modules.indicators.registry import build_default_registry
from src.modules.signals.service import SignalService
from src.shared.config import Config, load_config
from src.shared.logger import get_logger

logger = get_logger(__name__)


def parse_request(body: Any, config: Config) -> dict[str, Any]:
    """Validate a detection request and fill in defaults.

    Args:
        body: Request body as a dict or JSON string.
        config: Application configuration supplying defaults.

    Returns:
        Dict with symbol, timeframe, exchange, limit, indicators (None = all)
        and params.

    Raises:
        ValueError: If the body is malformed or the symbol is missing.
    """
    if isinstance(body, str):
        try:
            body = json.loads(body) if body else {}
        except json.JSONDecodeError as e:
            raise ValueError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")

    symbol = body.get("symbol")
    if not symbol or not isinstance(symbol, str):
        raise ValueError("Missing required parameter: symbol")

    indicators = body.get("indicators")
    if isinstance(indicators, str):
        indicators = [indicators]
    if indicators is not None and not (
        isinstance(indicators, list) and all(isinstance(name, str) for name in indicators)
    ):
        raise ValueError("indicators must be a string or a list of strings")

    raw_limit = body.get("limit")
    try:
        limit = config.default_limit if raw_limit is None else int(raw_limit)
    except (TypeError, ValueError) as e:
        raise ValueError(f"limit must be an integer, got {raw_limit!r}") from e
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    params = body.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError("params must be an object keyed by indicator name")
    for name, values in params.items():
        if not isinstance(values, dict):
            raise ValueError(f"params for {name!r} must be an object")

    return {
        "symbol": symbol,
        "timeframe": body.get("timeframe") or config.default_timeframe,
        "exchange": (body.get("exchange") or config.default_exchange).lower(),
        "limit": limit,
        "indicators": indicators or None,
        "params": params,
    }


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda handler for signal detection.

    Args:
        event: API Gateway event (with a 'body') or a direct payload.
        context: Lambda context.

    Returns:
        Response with statusCode and body.
    """
    logger.info("Starting Signal Detection Lambda")

    try:
        config = load_config()

        try:
            request = parse_request(event.get("body", event), config)
        except ValueError as e:
            return {"statusCode": 400, "body": {"success": False, "error": str(e)}}

        manager = PriceDataManager.from_config(config)
        try:
            candles = manager.get_price_data(
                request["exchange"],
                request["symbol"],
                request["timeframe"],
                limit=request["limit"],
            )
        except ValueError as e:
            return {"statusCode": 400, "body": {"success": False, "error": str(e)}}
        except ProviderError as e:
            logger.error(f"Failed to fetch candles: {e}")
            return {"statusCode": 502, "body": {"success": False, "error": str(e)}}

        if not candles:
            return {
                "statusCode": 404,
                "body": {"success": False, "error": "No price data found"},
            }

        registry = build_default_registry(
            BinanceFuturesProvider(config.binance_futures_url, config.funding_rate_timeout)
        )
        service = SignalService(registry, funding_timeout=config.funding_rate_timeout)
        result = service.detect_sync(
            candles,
            request["indicators"],
            symbol=request["symbol"],
            params=request["params"],
        )

        body = {
            "success": True,
            "signals": [signal.to_dict() for signal in result.signals],
            "failures": [failure.to_dict() for failure in result.failures],
            "metadata": {
                "symbol": request["symbol"],
                "timeframe": request["timeframe"],
                "exchange": request["exchange"],
                "timestamp": int(time.time() * 1000),
                "indicators": request["indicators"] or registry.get_supported_indicators(),
            },
        }

        logger.info(
            "Signal detection complete",
            extra={"signals": len(result.signals), "failures": len(result.failures)},
        )

        return {"statusCode": 200 if result.ok else 207, "body": body}

    except Exception as e:
        logger.exception("Fatal error in Signal Detection Lambda")
        return {
            "statusCode": 500,
            "body": {"success": False, "error": f"Internal Server Error: {e}"},
        }
