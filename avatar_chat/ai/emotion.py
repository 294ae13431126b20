"""
Emotion classifier - maps reply text to an avatar emotion by keyword scoring.

Each marker counts once when it appears anywhere in the lower-cased text. A tag
wins only with at least ``MIN_EMOTION_SCORE`` distinct markers and a strictly
higher score than every other tag; anything weaker stays ``talking`` so a single
incidental word ("problem") does not flip the avatar's mood.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

from ..models.chat import EmotionTag
from ..utils.logger import get_logger

logger = get_logger(__name__)

MIN_EMOTION_SCORE = 2

KEYWORD_TABLE: Mapping[EmotionTag, Tuple[str, ...]] = MappingProxyType({
    EmotionTag.CELEBRATING: (
        "congratulations", "great job", "well done", "excellent", "amazing",
        "fantastic", "wonderful", "awesome", "perfect", "brilliant", "impressive",
        "outstanding", "success", "achievement", "celebrate", "hooray", "yay",
        "bravo", "superb", "🎉", "🎊", "✨", "🌟", "⭐", "🏆", "👏", "good job",
        "nice work", "proud",
        "恭喜", "祝贺", "太棒了", "太好了", "干得好", "厉害", "完美", "精彩",
        "优秀", "成功", "庆祝", "骄傲",
    ),
    EmotionTag.THINKING: (
        "let me explain", "think about", "consider this", "ponder", "analyze",
        "understand", "concept", "theory", "principle", "reason", "because",
        "therefore", "complex", "intricate", "detailed", "specifically",
        "let's explore", "imagine", "suppose", "hypothesis", "question",
        "让我解释", "想一想", "考虑", "分析", "理解", "概念", "理论", "原理",
        "原因", "因为", "所以", "复杂", "详细", "具体来说", "想象", "假设",
    ),
    EmotionTag.ANGRY: (
        "careful", "watch out", "warning", "danger", "oops", "mistake", "error",
        "incorrect", "wrong", "avoid", "don't", "shouldn't", "risky", "concern",
        "worried", "caution", "alert", "attention", "important", "critical",
        "serious", "issue", "problem", "⚠️", "❗", "❌",
        "小心", "警告", "危险", "错误", "不要", "不应该", "风险", "担心",
        "谨慎", "严重", "骗局",
    ),
})

def score_emotions(text: str) -> Dict[EmotionTag, int]:
    """Count the distinct markers of each scored emotion present in ``text``."""
    lowered = text.lower()
    return {
        emotion: sum(1 for marker in markers if marker.lower() in lowered)
        for emotion, markers in KEYWORD_TABLE.items()
    }

def classify(text: str) -> EmotionTag:
    """Pick the avatar emotion for a reply; ``talking`` unless one tag clearly wins."""
    scores = score_emotions(text)
    logger.debug(f"Emotion scores: {dict((emotion.value, score) for emotion, score in scores.items())}")
    best_emotion = max(scores, key=scores.get)
    best_score = scores[best_emotion]

    if best_score < MIN_EMOTION_SCORE:
        return EmotionTag.TALKING

    # Ties never pick a side
    if any(score == best_score for emotion, score in scores.items() if emotion != best_emotion):
        return EmotionTag.TALKING

    return best_emotion
