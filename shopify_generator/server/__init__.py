"""HTTP hosting layer (FastAPI) around the image-to-CSV pipeline."""
