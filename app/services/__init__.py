"""Application services: authentication, wardrobe items and image storage."""
