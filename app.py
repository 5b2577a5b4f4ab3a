from fastapi import FastAPI, File, UploadFile, Form, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import logging
from typing import List, Optional

from verification.models import Asset
from verification.run_pipeline import run_pipeline
from config import settings, DOCUMENT_CATEGORY

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Identity Verification Service",
    description="Simulated identity document verification with heuristic analysis",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Verification API
# ------------------------
@app.post("/verify")
async def verify(
    files: List[UploadFile] = File(...),
    categories: List[str] = Form(...),
    country: Optional[str] = Form(None),
    document_type: Optional[str] = Form(None),
    ocr_text: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None)
):
    """
    Verify an identity document and face capture.
    Each upload needs a category (id_document / face_photo / face_video), in the same order.
    """
    if len(files) != len(categories):
        raise HTTPException(
            status_code=400,
            detail=f"Got {len(files)} files but {len(categories)} categories"
        )

    try:
        assets = []
        document_image = None

        for uploaded_file, category in zip(files, categories):
            data = await uploaded_file.read()
            assets.append(Asset(
                name=uploaded_file.filename or "",
                category=category,
                mime_type=uploaded_file.content_type,
                size=len(data)
            ))
            # Only the first ID document is analysed
            if category == DOCUMENT_CATEGORY and document_image is None:
                document_image = data

        return await run_pipeline(
            assets,
            country=country,
            document_type=document_type,
            ocr_text=ocr_text,
            document_image=document_image,
            video_url=video_url
        )

    except Exception as e:
        logger.exception("Verification failed")
        raise HTTPException(
            status_code=500,
            detail=f"Verification failed: {str(e)}"
        )


# ------------------------
# Health Check
# ------------------------
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "identity-verification"
    }


# ------------------------
# Local Dev Entry
# ------------------------
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
