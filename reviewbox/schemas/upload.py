"""
Pydantic schemas for image upload
"""

from pydantic import BaseModel


class ImageUploadResponse(BaseModel):
    success: bool = True
    image_url: str
