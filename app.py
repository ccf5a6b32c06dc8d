import logging

from flask import Flask, jsonify
from flask_cors import CORS

from config import Config
from routes import admin_bp, checkout_bp, pages_bp
from services.errors import BookingError
from services.processor import ProcessorError, StripeProcessor
from utils.emailer import ResendMailer

logger = logging.getLogger(__name__)

API_CSP = "default-src 'none'; frame-ancestors 'none';"
PAGE_CSP = (
    "default-src 'self'; script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; frame-ancestors 'none';"
)


def create_app(config_object=Config, processor=None, mailer=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Reduce verbosity of third-party libraries
    logging.getLogger("stripe").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    # Keep analytics dicts (weekdays, months) in insertion order
    app.json.sort_keys = False

    # External collaborators; tests pass in-memory doubles
    app.extensions["payment_processor"] = processor or StripeProcessor(
        api_key=app.config.get("STRIPE_SECRET_KEY"),
        timeout=app.config.get("STRIPE_TIMEOUT_SECONDS", 30),
    )
    app.extensions["mailer"] = mailer or ResendMailer(
        api_key=app.config.get("RESEND_API_KEY"),
        from_email=app.config.get("EMAIL_FROM_ADDRESS"),
    )

    origins = [o.strip() for o in (app.config.get("CORS_ORIGINS") or "*").split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}})

    # Register routes
    app.register_blueprint(pages_bp)
    app.register_blueprint(checkout_bp)
    app.register_blueprint(admin_bp)

    @app.errorhandler(BookingError)
    def _booking_error(exc):
        return jsonify(error=exc.message), exc.status_code

    @app.errorhandler(ProcessorError)
    def _processor_error(exc):
        logger.error("Payment processor error: %s %s", exc.type, exc.message)
        return jsonify(error=exc.message, type=exc.type or "unknown"), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # The success page needs its inline script; JSON endpoints need nothing
        resp.headers["Content-Security-Policy"] = PAGE_CSP if resp.mimetype == "text/html" else API_CSP
        return resp

    register_cli(app)

    return app

#-------------------------
import click

from services.analytics import month_stats
from services.processor import get_processor
from services.sessions import session_metadata
from utils.booking_codec import decode_bookings
from utils.calendar_export import render_calendar


def register_cli(app):
    @app.cli.command("demo-stats")
    def demo_stats():
        """Print this month's demo count and revenue split."""
        stats = month_stats(get_processor())
        click.echo(f"Demos this month: {stats['thisMonthDemos']}")
        click.echo(f"Total revenue:    ${stats['totalRevenue']}")
        click.echo(f"Market share:     ${stats['marketShare']}")
        click.echo(f"Grassroots share: ${stats['grassrootsShare']}")

    @app.cli.command("export-ics")
    @click.argument("session_id")
    @click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to a file instead of stdout.")
    def export_ics(session_id, output):
        """Write the calendar file for a checkout session's demos."""
        session = get_processor().retrieve_session(session_id)
        meta = session_metadata(session)
        bookings = decode_bookings(meta)
        if not bookings:
            raise click.ClickException("No bookings found on that session")

        ics = render_calendar(bookings, meta.get("company"), meta.get("product"))
        if output:
            with open(output, "w", encoding="utf-8", newline="") as fh:
                fh.write(ics)
            click.echo(f"Wrote {len(bookings)} event(s) to {output}")
        else:
            click.echo(ics, nl=False)

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=3000)
