from __future__ import annotations

import argparse

import uvicorn

from httpshape.config import get_settings
from httpshape.main import create_app
from httpshape.observability.logging import configure_logging
from httpshape.observability.sampling import InvalidSampleRateError


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Healthcare demo API with sampled request/response logging")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--sample-rate", type=float, default=settings.sample_rate, help="Fraction of requests to log, 0.0-1.0")
    parser.add_argument("--log-file", default=settings.metadata_log_file, help="Also append metadata as JSON lines to this file")
    args = parser.parse_args()

    settings = settings.model_copy(
        update={
            "host": args.host,
            "port": args.port,
            "sample_rate": args.sample_rate,
            "metadata_log_file": args.log_file,
        }
    )

    configure_logging(settings.log_level, json_output=settings.log_json)
    try:
        app = create_app(settings)
    except InvalidSampleRateError as exc:
        parser.error(str(exc))

    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
