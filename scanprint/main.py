# -*- coding: utf-8 -*-
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from scanprint.core import config
from scanprint.core.controller import ScanController


# 1) FastAPI instance
app = FastAPI(
    title="Scan & Print Station",
    version="1.0.0",
    description="Scan product QR links, look them up, print labels and export the list to Excel",
)

from scanprint.ui.routes import router as ui_router
app.include_router(ui_router)

# 2) CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3) JSON API
from scanprint.api.routes import router as api_router
app.include_router(api_router)

# 4) Logs
config.LOG_DIR.mkdir(parents=True, exist_ok=True)
logger.add(str(config.LOG_FILE), rotation="1 MB", serialize=True)


@app.get("/")
def root():
    return {"message": "Scan station is running"}


# --- APP STATE: ScanController (startup) ---
@app.on_event("startup")
async def on_startup():
    # tests install their own controller before startup
    if getattr(app.state, "controller", None) is None:
        app.state.controller = ScanController.from_config()    # type: ignore[attr-defined]
    logger.info(f"Station ready: {app.state.controller.status()}")


# 5) Local run
if __name__ == "__main__":
    import uvicorn
    print("Starting server...")
    uvicorn.run("scanprint.main:app", host=config.HOST, port=config.PORT, reload=True)


@app.on_event("shutdown")
async def on_shutdown():
    ctl: ScanController = app.state.controller    # type: ignore[attr-defined]
    await ctl.stop()
