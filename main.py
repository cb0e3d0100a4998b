import asyncio
import logging
import signal
import sys
from aiogram import Bot, Dispatcher
from aiohttp import web
from config import BOT_TOKEN, PORT, API_BASE_URL
from handlers import start, registration

# Configure logging
logging.basicConfig(level=logging.INFO, stream=sys.stdout)
logger = logging.getLogger(__name__)


@web.middleware
async def logging_middleware(request, handler):
    """Log every incoming request to the terminal."""
    logger.info(f"📡 Incoming Request: {request.method} {request.path}")
    return await handler(request)


# ── Health Check Endpoint ─────────────────────────────────────────────────
async def health_check(request):
    """Returns 200 so the host knows the service is alive."""
    return web.json_response({"status": "ok", "service": "company-registration-bot"})


def create_web_app() -> web.Application:
    app = web.Application(middlewares=[logging_middleware])
    app.router.add_get('/', health_check)
    return app


def create_dispatcher() -> Dispatcher:
    dp = Dispatcher()
    # /start and login first so they work from any registration step
    dp.include_router(start.router)
    dp.include_router(registration.router)
    return dp


async def main():
    # Initialize Bot and Dispatcher
    bot = Bot(token=BOT_TOKEN)
    dp = create_dispatcher()

    # ── Web Application ──────────────────────────────────────────────────
    app = create_web_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, '0.0.0.0', PORT, reuse_address=True)

    logger.info(f"🚀 Starting Bot and Web Server on 0.0.0.0:{PORT}...")
    logger.info(f"🏢 Registration endpoint base: {API_BASE_URL}")

    # ── Graceful SIGTERM Handling ─────────────────────────────────────────
    # Stop polling first so the next instance can start
    # without TelegramConflictError.
    stop_event = asyncio.Event()

    def handle_sigterm(*args):
        logger.info("⚠️ SIGTERM received — stopping polling gracefully...")
        stop_event.set()

    signal.signal(signal.SIGTERM, handle_sigterm)
    signal.signal(signal.SIGINT, handle_sigterm)

    try:
        await site.start()

        try:
            await bot.delete_webhook(drop_pending_updates=True)
            logger.info("🔄 Webhook cleared, starting fresh polling...")
        except Exception as e:
            logger.warning(f"⚠️ Could not clear webhook: {e}")

        polling_task = asyncio.create_task(dp.start_polling(bot))

        await stop_event.wait()

        logger.info("🛑 Stopping bot polling...")
        await dp.stop_polling()
        polling_task.cancel()
        try:
            await polling_task
        except asyncio.CancelledError:
            pass

    except Exception as e:
        logger.error(f"Error in main loop: {e}", exc_info=True)
    finally:
        logger.info("🧹 Cleaning up...")
        try:
            await bot.session.close()
            logger.info("✅ Bot session closed.")
        except Exception as e:
            logger.error(f"Error closing bot session: {e}")
        try:
            await runner.cleanup()
            logger.info("✅ Web runner cleaned up.")
        except Exception as e:
            logger.error(f"Error cleaning up runner: {e}")


if __name__ == "__main__":
    if not BOT_TOKEN:
        logging.warning("⚠️ BOT_TOKEN is not set!")

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("⚠️ Bot stopped by user.")
    except Exception as e:
        logger.error(f"⚠️ Critical Error: {e}")
