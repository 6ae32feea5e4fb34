from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck(request: Request):
    config = request.app.state.config
    return {
        "status": "available",
        "system_info": {
            "environment": config.ENVIRONMENT,
            "version": config.VERSION,
        },
    }
