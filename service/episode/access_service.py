"""
에피소드 접근 권한 서비스

에피소드 열람 가능 여부를 순서대로 판정합니다.
공개 상태 확인은 무료 에피소드 허용보다 먼저 수행됩니다.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from exceptions import InvalidIdError
from models import Episode, EpisodeAccessType, EpisodeStatus, User, UserLibraryItem
from utils.ids import is_valid_id, parse_id

logger = logging.getLogger(__name__)


@dataclass
class EpisodeData:
    id: str
    title: str
    access_type: EpisodeAccessType
    status: EpisodeStatus
    price: Optional[int] = None
    is_owned: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "accessType": self.access_type.value,
            "status": self.status.value,
        }
        if self.price is not None:
            data["price"] = self.price
        if self.is_owned is not None:
            data["isOwned"] = self.is_owned
        return data


@dataclass
class NovelData:
    id: str
    title: str
    slug: str
    author_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "authorId": self.author_id,
        }


@dataclass
class EpisodeAccessResult:
    """접근 권한 판정 결과"""
    can_access: bool
    reason: Optional[str] = None
    episode_data: Optional[EpisodeData] = None
    novel_data: Optional[NovelData] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"canAccess": self.can_access}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.episode_data is not None:
            data["episodeData"] = self.episode_data.to_dict()
        if self.novel_data is not None:
            data["novelData"] = self.novel_data.to_dict()
        return data


class EpisodeAccessService:
    """에피소드 접근 권한 서비스"""

    @staticmethod
    async def check_access(user_id: Optional[str], episode_id: str) -> EpisodeAccessResult:
        """
        에피소드 접근 권한 확인

        판정 순서:
            1. 잘못된 에피소드 ID → 거부
            2. 에피소드 없음 → 거부
            3. 미공개 → 거부 (무료여도, 작가여도)
            4. 무료 → 허용
            5. 비로그인 → 거부
            6. 작가 → 허용
            7. Admin/Moderator → 허용
            8. 구매함 → 허용 (isOwned)
            9. 그 외 → 거부 (구매 가격 포함)

        Args:
            user_id: 유저 ID (비로그인이면 None)
            episode_id: 에피소드 ID

        Returns:
            접근 권한 판정 결과
        """
        try:
            if not is_valid_id(episode_id):
                return EpisodeAccessResult(can_access=False, reason="잘못된 에피소드 ID입니다")

            episode = await Episode.get_or_none(id=parse_id(episode_id, "episode_id")).prefetch_related("novel")
            if not episode:
                return EpisodeAccessResult(can_access=False, reason="에피소드를 찾을 수 없습니다")

            episode_data = EpisodeData(
                id=str(episode.id),
                title=episode.title,
                access_type=episode.access_type,
                status=episode.status,
            )

            if not episode.is_published:
                return EpisodeAccessResult(
                    can_access=False,
                    reason="아직 공개되지 않은 에피소드입니다",
                    episode_data=episode_data,
                )

            novel = episode.novel
            result = EpisodeAccessResult(
                can_access=False,
                episode_data=episode_data,
                novel_data=NovelData(
                    id=str(novel.id),
                    title=novel.title,
                    slug=novel.slug,
                    author_id=str(novel.author_id),
                ),
            )

            if episode.is_free:
                result.can_access = True
                return result

            if not user_id:
                result.reason = "이 에피소드를 보려면 로그인해주세요"
                return result

            user_uuid = parse_id(user_id, "user_id")

            if str(novel.author_id) == str(user_uuid):
                result.can_access = True
                return result

            user = await User.get_or_none(id=user_uuid)
            if user and user.is_privileged:
                result.can_access = True
                return result

            if await EpisodeAccessService.has_user_purchased_episode(user_uuid, episode.id):
                result.can_access = True
                episode_data.is_owned = True
                return result

            price = await episode.get_effective_price(novel=novel)
            episode_data.price = price
            result.reason = f"이 에피소드는 {price} 코인에 구매할 수 있습니다"
            return result

        except InvalidIdError as e:
            return EpisodeAccessResult(can_access=False, reason=e.message)
        except Exception as e:
            logger.error(
                f"Access check failed: user_id={user_id}, episode_id={episode_id}: {e}",
                exc_info=True
            )
            return EpisodeAccessResult(can_access=False, reason="권한 확인 중 오류가 발생했습니다")

    @staticmethod
    async def is_episode_owner(user_id: str, episode_id: str) -> bool:
        """유저가 에피소드의 작가(공동 작가 포함)인지 확인"""
        try:
            user_uuid = parse_id(user_id, "user_id")
            episode = await Episode.get_or_none(
                id=parse_id(episode_id, "episode_id")
            ).prefetch_related("novel", "novel__co_authors")
            if not episode:
                return False

            novel = episode.novel
            if str(novel.author_id) == str(user_uuid):
                return True
            return any(str(co_author.id) == str(user_uuid) for co_author in novel.co_authors)

        except Exception as e:
            logger.error(f"Owner check failed: user_id={user_id}, episode_id={episode_id}: {e}")
            return False

    @staticmethod
    async def has_user_purchased_episode(user_id: Any, episode_id: Any, using_db=None) -> bool:
        """
        유저가 에피소드를 구매했는지 확인

        서재 항목의 구매 에피소드 목록에 포함되어 있는지로 판정합니다.
        잘못된 ID나 조회 실패는 False입니다.

        Args:
            user_id: 유저 ID
            episode_id: 에피소드 ID
            using_db: 트랜잭션 커넥션 (구매 트랜잭션 내부 호출용)
        """
        if not is_valid_id(user_id) or not is_valid_id(episode_id):
            return False

        try:
            user_uuid = parse_id(user_id, "user_id")
            episode_uuid = parse_id(episode_id, "episode_id")

            episode = await Episode.get_or_none(id=episode_uuid, using_db=using_db)
            if not episode:
                return False

            query = UserLibraryItem.filter(
                user_id=user_uuid,
                novel_id=episode.novel_id,
                purchased_episodes__id=episode_uuid,
            )
            if using_db is not None:
                query = query.using_db(using_db)
            return await query.exists()

        except Exception as e:
            if using_db is not None:
                raise
            logger.error(f"Purchase check failed: user_id={user_id}, episode_id={episode_id}: {e}")
            return False

    @staticmethod
    async def get_episode_price(episode_id: str) -> int:
        """에피소드 실제 구매 가격 (조회 실패 시 0)"""
        try:
            episode = await Episode.get_or_none(id=parse_id(episode_id, "episode_id"))
            if not episode:
                logger.warning(f"Episode not found for price: episode_id={episode_id}")
                return 0
            return await episode.get_effective_price()

        except Exception as e:
            logger.error(f"Price lookup failed: episode_id={episode_id}: {e}")
            return 0
