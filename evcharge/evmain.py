from contextlib import asynccontextmanager
from fastapi import FastAPI
from evcharge.configuration.config import Config
from evcharge.configuration.database import init_db
from evcharge.configuration.monitor import instrument_fastapi, logger
from evcharge.routers import rou_auth, rou_availability, rou_booking, rou_station

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Misconfiguration is fatal at startup rather than failing every request
    Config.validate()
    init_db()
    logger.info("EV Charge API started")
    yield

app = FastAPI(
    title="EV Charge API",
    description="Charging station listings and hourly slot bookings",
    version="1.0.0",
    lifespan=lifespan
)

# Include all routers
app.include_router(rou_auth.router)
app.include_router(rou_station.router)
app.include_router(rou_availability.router)
app.include_router(rou_booking.router)

# Instrument app with OpenTelemetry
instrument_fastapi(app)

if __name__ == '__main__':
    import uvicorn
    uvicorn.run(app, host='0.0.0.0', port=8000)
