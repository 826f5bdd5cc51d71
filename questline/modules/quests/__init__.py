from questline.modules.quests.service import QuestService

__all__ = ["QuestService"]
