"""
Import a directory of images into the gallery.

Usage:
    invoke -c tagfolio.cli.import_photos import-photos --directory ./photos --tags "여행, 바다" \
        --link https://example.com/trip
"""

import os

import structlog
from dotenv import load_dotenv
from invoke import Context, task

from tagfolio.config import get_config
from tagfolio.error_handling import GalleryError
from tagfolio.services.auth import AuthService, DevelopmentAuthService, create_auth_service
from tagfolio.services.gallery import GalleryService
from tagfolio.services.image_processor import get_image_processor
from tagfolio.services.photo_store import get_photo_store

logger = structlog.get_logger()


def find_image_files(directory: str, recursive: bool = False) -> list[str]:
    """List supported image files in ``directory``, sorted by path."""
    processor = get_image_processor()
    image_files = []
    if recursive:
        for root, _, files in os.walk(directory):
            for name in files:
                if processor.is_supported_format(name):
                    image_files.append(os.path.join(root, name))
    else:
        for name in os.listdir(directory):
            path = os.path.join(directory, name)
            if os.path.isfile(path) and processor.is_supported_format(name):
                image_files.append(path)
    return sorted(image_files)


def import_files(gallery: GalleryService, image_files: list[str], tags: str, link: str) -> tuple[int, int]:
    """
    Encode and add each file as a new entry.

    Returns:
        (successful, failed) counts
    """
    processor = get_image_processor()
    successful = 0
    failed = 0

    for file_path in image_files:
        filename = os.path.basename(file_path)
        try:
            with open(file_path, "rb") as f:
                data_url = processor.to_data_url(f.read(), filename)
            photo_id = gallery.save_photo("", tags, link, data_url, reload=False)
            logger.info("photo_imported", filename=filename, photo_id=photo_id)
            successful += 1
        except (GalleryError, OSError) as e:
            logger.error("photo_import_failed", filename=filename, error=str(e))
            failed += 1

    if successful:
        gallery.load_photos()
    return successful, failed


def owner_credentials(auth_service: AuthService) -> tuple[str, str]:
    """Configured owner email and password for the given sign-in backend."""
    if isinstance(auth_service, DevelopmentAuthService):
        return auth_service.dev_email, auth_service.dev_password
    config = get_config()
    return str(config.get("OWNER_EMAIL", "")), str(config.get("OWNER_PASSWORD", ""))


@task
def import_photos(
    c: Context,
    directory: str,
    link: str,
    tags: str = "",
    email: str = "",
    password: str = "",
    env_file: str = ".env",
    recursive: bool = False,
    dry_run: bool = False,
):
    """
    Import every image in a directory as a gallery entry.

    Args:
        c (Context): Invoke context.
        directory (str): Directory containing images.
        link (str): Link stored on every imported entry.
        tags (str): Comma-separated tags for every imported entry.
        email (str): Owner email. Defaults to OWNER_EMAIL, or DEV_OWNER_EMAIL with development sign-in.
        password (str): Owner password. Defaults to OWNER_PASSWORD, or DEV_OWNER_PASSWORD with development sign-in.
        env_file (str): Path to the environment file. Default is '.env'.
        recursive (bool): Search subdirectories too. Default is False.
        dry_run (bool): Only list the files that would be imported. Default is False.
    """
    if os.path.exists(env_file):
        logger.info("env_file_loaded", path=env_file)
        load_dotenv(dotenv_path=env_file)
        get_config().clear_cache()
    else:
        logger.warning("env_file_not_found", path=env_file)

    if not os.path.isdir(directory):
        logger.error("directory_not_found", directory=directory)
        return

    image_files = find_image_files(directory, recursive)
    if not image_files:
        logger.warning("no_image_files_found", directory=directory)
        return

    logger.info("import_started", directory=directory, files=len(image_files), dry_run=dry_run)

    if dry_run:
        print("\n--- Dry Run Mode: Files to be imported ---")
        for file_path in image_files:
            print(f"- {file_path}")
        print("--- End of Dry Run ---")
        return

    auth_service = create_auth_service()
    try:
        default_email, default_password = owner_credentials(auth_service)
        auth_service.sign_in(email or default_email, password or default_password)
    except GalleryError as e:
        logger.error("import_sign_in_failed", code=e.code)
        print(f"\nSign-in failed: {e.user_message}")
        return

    gallery = GalleryService(get_photo_store(), auth_service)
    successful, failed = import_files(gallery, image_files, tags, link)

    logger.info("import_finished", successful=successful, failed=failed, total=len(image_files))
    print(f"\nImport complete. Successful: {successful}, Failed: {failed}")
