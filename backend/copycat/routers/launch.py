# copycat/routers/launch.py
import json
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from copycat.errors import LaunchError, UnhandledError
from copycat.schemas.launch import parse_launch_request
from copycat.services.launch_pipeline import LaunchPipeline, launch_pipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=['launch'])

# Legacy path kept for front-ends that still call the old serverless function
NETLIFY_LAUNCH_PATH = "/.netlify/functions/launch"


def get_launch_pipeline() -> LaunchPipeline:
    return launch_pipeline


@router.post("/launch")
@router.post(NETLIFY_LAUNCH_PATH, include_in_schema=False)
async def launch_token(request: Request, pipeline: LaunchPipeline = Depends(get_launch_pipeline)):
    """
    Relaunch a token from existing metadata.
    Body: { name, symbol, uri, devBuy?, slippage?, priorityFee?, pool?, image? }
    """
    try:
        raw_body = await request.body()
        body = json.loads(raw_body) if raw_body.strip() else {}

        launch_request = parse_launch_request(body)
        logger.info(f"Launch requested: {launch_request.name} ({launch_request.symbol}) from {launch_request.uri}")

        result = await pipeline.run(launch_request)
        return JSONResponse(status_code=200, content=result.model_dump())

    except LaunchError as e:
        logger.warning(f"Launch rejected ({e.status_code}): {e.error}")
        raise
    except Exception as e:
        logger.error(f"Unhandled launch error: {e}", exc_info=True)
        raise UnhandledError.from_exception(e) from e


@router.options("/launch")
@router.options(NETLIFY_LAUNCH_PATH, include_in_schema=False)
async def launch_preflight():
    return Response(status_code=204)
