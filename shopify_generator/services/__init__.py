from shopify_generator.services.batch import BatchOrchestrator, validate_images
from shopify_generator.services.storage_client import ImageUploader
from shopify_generator.services.vision_client import VisionClassifier

__all__ = ["BatchOrchestrator", "ImageUploader", "VisionClassifier", "validate_images"]
