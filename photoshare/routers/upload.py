from fastapi import APIRouter, Depends, File, UploadFile
from photoshare.core.blob_store import BlobStore, get_blob_store, read_upload
from photoshare.core.security import get_current_user
from photoshare.db.models.user import User
from photoshare.schemas.post import UploadOut

router = APIRouter()

# Returns the path to pass as "image" when creating a post
@router.post("", response_model=UploadOut)
def upload_image(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    blob_store: BlobStore = Depends(get_blob_store)
):
    data = read_upload(file)
    url = blob_store.store(data, file.content_type, folder="post_images")
    return {"url": url, "size": len(data), "type": file.content_type}
