from fastapi import APIRouter, UploadFile, File, HTTPException

from showroom.app.services.stock_upload import FEED_STANDARD, ingest_stock_upload

router = APIRouter()


@router.post("")
async def upload(file: UploadFile = File(...), feed: str = FEED_STANDARD):
    content = await file.read()
    try:
        return ingest_stock_upload(file.filename, content, feed=feed)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except HTTPException:
        raise
    except Exception as exc:  # pragma: no cover - unexpected failure
        raise HTTPException(status_code=500, detail="Upload failed") from exc
