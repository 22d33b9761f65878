# 📄 File: adoptd/modules/plant_ai/domain/services/scanner_service.py
# 🧭 Purpose (Layman Explanation):
# Takes a plant photo, checks that it is a real picture and that the user still has
# scans left today, asks the AI what the plant is or what is wrong with it, and
# turns the answer into tidy sections with "repeat in N days" hints.
# 🧪 Purpose (Technical Summary):
# Scan pipeline: image validation (before any remote call or quota use) ->
# check_and_increment('scan') -> prompt -> generative call -> parse -> record
# plant_scanned and reconcile achievements.
# 🔗 Dependencies:
# GenerativeModel, EntitlementState, AchievementState, ProfileState, prompts, parsers, validators
# 🔄 Connected Modules / Calls From:
# Plant AI scan endpoint

from typing import Optional, Union

from adoptd.modules.achievements.domain.models.achievement import ActionType
from adoptd.modules.achievements.domain.services.achievement_service import AchievementState
from adoptd.modules.entitlement.domain.models.entitlement import UsageAction
from adoptd.modules.entitlement.domain.services.entitlement_service import EntitlementState
from adoptd.modules.plant_ai.domain.models.plant_ai import ScanResult, ScanType
from adoptd.modules.plant_ai.domain.repositories.generative_model import GenerativeModel
from adoptd.modules.plant_ai.domain.services.parsers import parse_diagnosis, parse_identification
from adoptd.modules.plant_ai.domain.services.prompts import diagnose_prompt, identify_prompt
from adoptd.modules.session.domain.services.profile_service import ProfileState
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import QuotaExceededError
from adoptd.shared.utils.logging import get_logger
from adoptd.shared.utils.validators import validate_image_upload

logger = get_logger(__name__)


class PlantScanner:
    """
    Identification and diagnosis from a single plant photo.
    """

    def __init__(self, session: SessionState, entitlement: EntitlementState,
                 achievements: AchievementState, profile: ProfileState,
                 model: GenerativeModel, settings: Optional[Settings] = None):
        self.session = session
        self.entitlement = entitlement
        self.achievements = achievements
        self.profile = profile
        self.model = model
        self.settings = settings or get_settings()

    async def scan(
        self,
        scan_type: Union[ScanType, str],
        file_data: bytes,
        filename: str,
        content_type: Optional[str],
        plant_name: Optional[str] = None,
        language: str = "ru",
    ) -> ScanResult:
        """
        Run one metered scan.

        Raises:
            InvalidFileTypeError / FileTooLargeError: image rejected, quota untouched
            QuotaExceededError: daily scan limit reached
            ExternalAPIError: model call failed (the scan still counts)
        """
        user = self.session.require_user()
        scan_type = ScanType(scan_type)
        media_type = validate_image_upload(
            content_type, len(file_data), self.settings.MAX_IMAGE_SIZE, filename
        )

        if not await self.entitlement.check_and_increment(UsageAction.SCAN):
            raise QuotaExceededError(
                action=UsageAction.SCAN.value,
                limit=self.entitlement.quota(UsageAction.SCAN) or 0,
            )

        occupation = self.profile.occupation
        plant_name = plant_name.strip() if plant_name and plant_name.strip() else None
        if scan_type is ScanType.IDENTIFY:
            prompt = identify_prompt(language, occupation)
        else:
            prompt = diagnose_prompt(language, plant_name, occupation)

        text = await self.model.generate(prompt, file_data, media_type)

        if scan_type is ScanType.IDENTIFY:
            result = ScanResult(scan_type=scan_type, identification=parse_identification(text), raw_text=text)
        else:
            result = ScanResult(scan_type=scan_type, diagnosis=parse_diagnosis(text), raw_text=text)

        logger.log_user_action(f"plant_{scan_type.value}", user.user_id, resource=plant_name)
        await self.achievements.record_and_reconcile(ActionType.PLANT_SCANNED)
        return result
