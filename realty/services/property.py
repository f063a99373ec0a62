"""
Property service: catalogue queries and admin mutations.
Handles filter parsing, form parsing, image bookkeeping and change events.
"""

from typing import Optional, List, Dict, Any, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from fastapi import UploadFile

from realty.config import settings
from realty.events import EventChannel, EventKind, PropertyEvent, property_events
from realty.repositories.property import PropertyRepository, PropertyFilters
from realty.models.property import Property, PropertyType, PropertyStatus, MAX_PRICE, MAX_AREA, MAX_COUNT
from realty.services.image import ImageService
from realty.utils.validators import ValidationUtils, is_blank
from realty.utils.exceptions import (
    ValidationError,
    PropertyNotFoundError,
    ServerError
)
import uuid
import logging

logger = logging.getLogger(__name__)

# Query value that disables the status filter
ALL_STATUSES = "all"
# Above every storable price, so clamping a bound to it keeps its meaning
PRICE_BOUND_CEILING = MAX_PRICE + 1


class PropertyService:
    """
    Property service for the public catalogue and the admin back office.
    Form and query values arrive as text and are parsed here so that errors
    name the offending field.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        image_service: Optional[ImageService] = None,
        events: Optional[EventChannel] = None
    ):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.image_service = image_service or ImageService()
        self.events = events if events is not None else property_events

    def parse_filters(
        self,
        property_type: Optional[str] = None,
        location: Optional[str] = None,
        min_price: Optional[str] = None,
        max_price: Optional[str] = None,
        status: Optional[str] = None
    ) -> PropertyFilters:
        """
        Turn raw query values into PropertyFilters.

        A blank value imposes no constraint; ``status=all`` is an explicit
        way to ask for every status. Price bounds are compared exactly as sent.

        Raises:
            ValidationError: If a value is malformed or minPrice > maxPrice
        """
        parsed_min = ValidationUtils.parse_non_negative_decimal(min_price, "minPrice", quantize=False)
        parsed_max = ValidationUtils.parse_non_negative_decimal(max_price, "maxPrice", quantize=False)
        if parsed_min is not None and parsed_max is not None and parsed_min > parsed_max:
            raise ValidationError("minPrice cannot be greater than maxPrice", field="minPrice")
        parsed_min, parsed_max = (
            None if bound is None else min(bound, PRICE_BOUND_CEILING)
            for bound in (parsed_min, parsed_max)
        )

        if is_blank(status) or status.strip().lower() == ALL_STATUSES:
            parsed_status = None
        else:
            parsed_status = ValidationUtils.parse_enum(status, PropertyStatus, "status")

        return PropertyFilters(
            property_type=ValidationUtils.parse_enum(property_type, PropertyType, "type"),
            location=ValidationUtils.validate_string(location, "location", max_length=255, required=False),
            min_price=parsed_min,
            max_price=parsed_max,
            status=parsed_status
        )

    async def list_properties(self, filters: PropertyFilters) -> List[Property]:
        """
        List properties matching every supplied filter, newest first.

        Raises:
            ServerError: If the query fails
        """
        try:
            return await self.property_repo.list_properties(filters)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list properties: {e}", exc_info=True)
            raise ServerError("Failed to fetch properties")

    async def get_property(self, property_id: uuid.UUID) -> Property:
        """
        Get property by ID.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            ServerError: If the query fails
        """
        try:
            property_obj = await self.property_repo.get_by_id(property_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to fetch property")

        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        logger.debug(f"Retrieved property: {property_id}")
        return property_obj

    def parse_property_form(self, form: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """
        Parse multipart form values into model fields.

        Args:
            form: Raw form values keyed by wire name (camelCase)
            partial: When True every field is optional

        Returns:
            Dictionary of model field values; absent fields are None

        Raises:
            ValidationError: Naming the first offending field
        """
        required = not partial
        return {
            "title": ValidationUtils.validate_string(form.get("title"), "title", max_length=255, required=required),
            "type": ValidationUtils.parse_enum(form.get("type"), PropertyType, "type", required=required),
            "description": ValidationUtils.validate_string(form.get("description"), "description", required=required),
            "location": ValidationUtils.validate_string(form.get("location"), "location", max_length=255, required=required),
            "price": ValidationUtils.parse_non_negative_decimal(form.get("price"), "price", required=required, max_value=MAX_PRICE),
            "status": ValidationUtils.parse_enum(form.get("status"), PropertyStatus, "status"),
            "bedrooms": ValidationUtils.parse_non_negative_int(form.get("bedrooms"), "bedrooms", max_value=MAX_COUNT),
            "bathrooms": ValidationUtils.parse_non_negative_int(form.get("bathrooms"), "bathrooms", max_value=MAX_COUNT),
            "parking_spaces": ValidationUtils.parse_non_negative_int(form.get("parkingSpaces"), "parkingSpaces", max_value=MAX_COUNT),
            "area": ValidationUtils.parse_non_negative_decimal(form.get("area"), "area", max_value=MAX_AREA),
        }

    async def create_property(
        self,
        form: Dict[str, Any],
        files: Sequence[UploadFile] = ()
    ) -> Property:
        """
        Create a property listing with uploaded images.

        Args:
            form: Raw form values
            files: Uploaded image files, at most the configured limit

        Returns:
            Created property instance

        Raises:
            ValidationError: If form values or files are invalid
            ServerError: If the property cannot be stored
        """
        create_data = self.parse_property_form(form)
        if create_data["status"] is None:
            create_data.pop("status")

        image_urls = await self.image_service.store_uploads(list(files))
        create_data["images"] = image_urls

        try:
            property_obj = await self.property_repo.create_property(create_data)
        except ValueError as e:
            self.image_service.discard(image_urls)
            raise ValidationError(str(e))
        except Exception as e:
            self.image_service.discard(image_urls)
            logger.error(f"Failed to create property: {e}", exc_info=True)
            raise ServerError("Failed to create property")

        logger.info(f"Property created: {property_obj.title} (ID: {property_obj.id}, {len(image_urls)} images)")
        self.events.publish(PropertyEvent(EventKind.CREATED, property_obj.id))
        return property_obj

    def resolve_images(
        self,
        current: List[str],
        existing_images: Optional[str],
        new_count: int
    ) -> Optional[List[str]]:
        """
        Decide which current images an update keeps.

        Args:
            current: Images currently stored on the property
            existing_images: Raw ``existingImages`` form value (JSON array)
            new_count: Number of newly uploaded files

        Returns:
            Retained image paths, or None when the image list stays unchanged

        Raises:
            ValidationError: If a retained path is not a current image or the
                combined count exceeds the limit
        """
        retained = ValidationUtils.parse_string_list(existing_images, "existingImages")

        if retained is None:
            if new_count == 0 and not settings.clear_images_when_omitted:
                return None
            retained = [] if settings.clear_images_when_omitted else list(current)
        else:
            unknown = [path for path in retained if path not in current]
            if unknown:
                raise ValidationError(
                    f"existingImages contains paths that are not images of this property: {', '.join(unknown)}",
                    field="existingImages"
                )
            # Keep first occurrence order, drop duplicates
            retained = list(dict.fromkeys(retained))

        self.image_service.check_image_limit(len(retained) + new_count)
        return retained

    async def update_property(
        self,
        property_id: uuid.UUID,
        form: Dict[str, Any],
        files: Sequence[UploadFile] = (),
        existing_images: Optional[str] = None
    ) -> Property:
        """
        Partially update a property.

        Retained images (``existingImages``) come first, new uploads are
        appended. Files of images dropped from the list are deleted after the
        update is committed.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            ValidationError: If update data is invalid
            ServerError: If the update cannot be stored
        """
        property_obj = await self.get_property(property_id)
        update_data = self.parse_property_form(form, partial=True)

        current_images = list(property_obj.images or [])
        files = list(files)
        retained = self.resolve_images(current_images, existing_images, len(files))

        new_urls: List[str] = []
        if retained is not None:
            new_urls = await self.image_service.store_uploads(files)
            update_data["images"] = retained + new_urls

        try:
            updated = await self.property_repo.update_property(property_obj, update_data)
        except ValueError as e:
            self.image_service.discard(new_urls)
            raise ValidationError(str(e))
        except Exception as e:
            self.image_service.discard(new_urls)
            logger.error(f"Failed to update property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to update property")

        if retained is not None:
            removed = [path for path in current_images if path not in update_data["images"]]
            if removed:
                self.image_service.discard(removed)
                logger.info(f"Removed {len(removed)} images from property {property_id}")

        logger.info(f"Property updated: {property_id}")
        self.events.publish(PropertyEvent(EventKind.UPDATED, updated.id))
        return updated

    async def delete_property(self, property_id: uuid.UUID) -> None:
        """
        Delete a property; its favorites go with it through the database cascade.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            ServerError: If the delete fails
        """
        property_obj = await self.get_property(property_id)
        images = list(property_obj.images or [])

        try:
            deleted = await self.property_repo.delete(property_id)
        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}", exc_info=True)
            raise ServerError("Failed to delete property")

        if not deleted:
            raise PropertyNotFoundError(str(property_id))

        self.image_service.discard(images)
        logger.info(f"Property deleted: {property_id}")
        self.events.publish(PropertyEvent(EventKind.DELETED, property_id))
