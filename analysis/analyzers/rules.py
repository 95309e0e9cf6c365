"""
Local Rule Book
===============

Age brackets, behavior rules and category advice used by the local
heuristic analyzer. All of it is data: the default tables below can be
replaced wholesale by a JSON file (see RuleBook.load).

Rules are grounded in classic developmental milestones (Piaget, Erikson,
Gesell). Keywords include the Chinese terms used by the mobile client.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Tuple, Optional, Any
from pathlib import Path
import json

from ..config import ConfigurationError


IMPORTANCE_LEVELS = frozenset({"critical", "important", "normal"})


# =============================================================================
# RULE TYPES
# =============================================================================

@dataclass(frozen=True)
class AgeBracket:
    """
    Half-open on the left: a child of `months` belongs to the first bracket
    with months <= max_months. max_months=None means unbounded.
    """
    key: str
    stage_label: str
    max_months: Optional[int]

    def contains(self, months: int) -> bool:
        return self.max_months is None or months <= self.max_months


@dataclass(frozen=True)
class BehaviorRule:
    bracket: str
    category: str
    keywords: Tuple[str, ...]
    interpretation: str
    milestone: str
    importance: str = "normal"

    def matches(self, behavior_text: str) -> bool:
        text = behavior_text.lower()
        for keyword in self.keywords:
            key = keyword.lower()
            if key in text or text in key:
                return True
        return False


@dataclass(frozen=True)
class RuleBook:
    """Complete rule data for the local analyzer."""
    brackets: Tuple[AgeBracket, ...]
    rules: Tuple[BehaviorRule, ...]
    advice: Dict[str, Tuple[str, ...]]
    generic_advice: Tuple[str, ...]
    emotional_notes: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.brackets:
            raise ConfigurationError("Rule book needs at least one age bracket")
        if self.brackets[-1].max_months is not None:
            raise ConfigurationError("Last age bracket must be unbounded")
        if not self.generic_advice:
            raise ConfigurationError("generic_advice must be non-empty")
        for rule in self.rules:
            if rule.importance not in IMPORTANCE_LEVELS:
                raise ConfigurationError(f"Unknown importance: {rule.importance}")

    def bracket_for(self, months: int) -> AgeBracket:
        for bracket in self.brackets:
            if bracket.contains(months):
                return bracket
        return self.brackets[-1]

    def find_rule(self, bracket: str, category: str, behavior_text: str) -> Optional[BehaviorRule]:
        """First rule for (bracket, category) whose keywords match."""
        for rule in self.rules:
            if rule.bracket != bracket or rule.category != category:
                continue
            if rule.matches(behavior_text):
                return rule
        return None

    def advice_for(self, category: str) -> Tuple[str, ...]:
        return self.advice.get(category) or self.generic_advice

    def emotional_note_for(self, category: str) -> Optional[str]:
        return self.emotional_notes.get(category)

    @classmethod
    def load(cls, config_path: Path) -> RuleBook:
        """Load a rule book from a JSON file."""
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read rule book {config_path}: {e}") from e

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> RuleBook:
        try:
            brackets = tuple(
                AgeBracket(
                    key=b['key'],
                    stage_label=b['stage_label'],
                    max_months=b.get('max_months')
                )
                for b in config['brackets']
            )
            rules = tuple(
                BehaviorRule(
                    bracket=r['bracket'],
                    category=r['category'],
                    keywords=tuple(r['keywords']),
                    interpretation=r['interpretation'],
                    milestone=r['milestone'],
                    importance=r.get('importance', 'normal')
                )
                for r in config.get('rules', [])
            )
            advice = {
                category: tuple(items)
                for category, items in config.get('advice', {}).items()
            }
            generic_advice = tuple(config.get('generic_advice', DEFAULT_GENERIC_ADVICE))
            emotional_notes = {
                category: str(note)
                for category, note in config.get('emotional_notes', {}).items()
            }
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"Malformed rule book: {e}") from e

        return cls(
            brackets=brackets,
            rules=rules,
            advice=advice,
            generic_advice=generic_advice,
            emotional_notes=emotional_notes
        )


# =============================================================================
# DEFAULT TABLES
# =============================================================================

DEFAULT_BRACKETS = (
    AgeBracket("0-3", "Early infancy (0-3 months)", 3),
    AgeBracket("3-6", "Infancy (3-6 months)", 6),
    AgeBracket("6-12", "Late infancy (6-12 months)", 12),
    AgeBracket("12-24", "Early toddlerhood (1-2 years)", 24),
    AgeBracket("24-36", "Toddlerhood (2-3 years)", 36),
    AgeBracket("36+", "Early childhood (3 years and up)", None),
)

DEFAULT_RULES = (
    # 0-3 months
    BehaviorRule(
        "0-3", "motor", ("lift head", "head up", "抬头"),
        "Neck muscles are getting stronger, an early milestone in motor control. "
        "Lifting the head briefly during tummy time shows the trunk muscles are developing.",
        "Gross motor: lifts head during tummy time", "important"),
    BehaviorRule(
        "0-3", "motor", ("grasp", "grip", "抓握"),
        "The grasp reflex is gradually turning into intentional grasping. Early hand-eye "
        "coordination is emerging, the basis for later fine motor skills.",
        "Fine motor: palmar grasp", "critical"),
    BehaviorRule(
        "0-3", "language", ("cry", "哭"),
        "Crying is an infant's first way to communicate. Different cries can signal "
        "hunger, pain or a need for comfort, the starting point of language.",
        "Pre-language: communicates through crying", "important"),
    BehaviorRule(
        "0-3", "social", ("gaze", "stare", "eye contact", "注视"),
        "Looking at faces shows visual focus and social interest are developing. "
        "This is where attachment begins.",
        "Social: gazes at faces, eye contact", "critical"),
    BehaviorRule(
        "0-3", "cognitive", ("sound", "noise", "声音"),
        "Reacting to sounds shows the hearing system is working and the baby is "
        "starting to tell sounds apart, a basis for language and cognition.",
        "Cognitive: turns toward sounds", "important"),

    # 3-6 months
    BehaviorRule(
        "3-6", "motor", ("roll", "翻身"),
        "Rolling over marks growing core strength and coordination between both sides "
        "of the body. It lets the baby start exploring on their own.",
        "Gross motor: rolls from back to tummy", "critical"),
    BehaviorRule(
        "3-6", "motor", ("sit", "坐"),
        "Sitting needs back strength and balance. It frees the hands and widens the "
        "view, which greatly boosts exploration.",
        "Gross motor: supported sitting to independent sitting", "critical"),
    BehaviorRule(
        "3-6", "language", ("babble", "coo", "咿呀"),
        "Babbling is an important stage of language development. The baby practices "
        "sounds that will later become words. Talking back encourages it.",
        "Language: babbles vowel and consonant combinations", "important"),
    BehaviorRule(
        "3-6", "social", ("smile", "laugh", "笑"),
        "A social smile shows the baby recognizes familiar faces and responds to "
        "social contact, an important sign of emotional bonding and trust.",
        "Social: smiles at familiar people", "critical"),
    BehaviorRule(
        "3-6", "cognitive", ("toy", "玩具"),
        "Reaching for and exploring toys shows hand-eye coordination and early "
        "object concepts are developing.",
        "Cognitive: grasps and explores objects", "important"),

    # 6-12 months
    BehaviorRule(
        "6-12", "motor", ("crawl", "爬"),
        "Crawling builds limb coordination, spatial awareness and balance all at once.",
        "Gross motor: crawls on hands and knees", "critical"),
    BehaviorRule(
        "6-12", "motor", ("stand", "站"),
        "Pulling to stand shows leg strength and balance are improving. This is the "
        "key transition toward walking and a sign of growing autonomy.",
        "Gross motor: pulls to stand, stands alone", "critical"),
    BehaviorRule(
        "6-12", "language", ("mama", "dada", "first word", "叫"),
        "Saying a first meaningful word shows understanding is turning into "
        "expression, a turning point in language development.",
        "Language: first meaningful word", "critical"),
    BehaviorRule(
        "6-12", "social", ("stranger", "陌生人"),
        "Stranger anxiety shows the baby can tell familiar from unfamiliar people. "
        "It is a normal sign of cognitive growth and deepening attachment.",
        "Social: stranger anxiety", "normal"),
    BehaviorRule(
        "6-12", "cognitive", ("peekaboo", "peek-a-boo", "躲猫猫"),
        "Enjoying peekaboo shows object permanence is forming: things still exist "
        "when out of sight. This is a key milestone in Piaget's sensorimotor stage.",
        "Cognitive: object permanence", "critical"),
    BehaviorRule(
        "6-12", "emotional", ("separation", "分离"),
        "Separation anxiety shows attachment is established and the baby notices "
        "when the main caregiver leaves. It is a normal emotional stage.",
        "Emotional: separation anxiety", "normal"),

    # 12-24 months
    BehaviorRule(
        "12-24", "motor", ("walk", "走"),
        "Walking independently widens the child's world and supports spatial "
        "understanding, autonomy and confidence.",
        "Gross motor: walks independently", "critical"),
    BehaviorRule(
        "12-24", "motor", ("run", "跑"),
        "Moving from walking to running shows better balance, coordination and "
        "strength control.",
        "Gross motor: runs, possibly unsteadily", "important"),
    BehaviorRule(
        "12-24", "motor", ("eat", "spoon", "吃"),
        "Trying to self-feed with a spoon or fingers shows fine motor skills and "
        "autonomy are developing, the start of self-care.",
        "Fine motor: self-feeding", "important"),
    BehaviorRule(
        "12-24", "language", ("word", "词"),
        "This is the vocabulary burst. The child links words to concepts and starts "
        "combining them to say more complex things.",
        "Language: rapid vocabulary growth, first phrases", "critical"),
    BehaviorRule(
        "12-24", "cognitive", ("imitate", "copy", "模仿"),
        "Deferred imitation shows memory and symbolic thinking are developing, the "
        "basis for learning and imagination.",
        "Cognitive: deferred imitation", "important"),
    BehaviorRule(
        "12-24", "emotional", ("mine", "myself", "自我"),
        "Saying \"me\" and \"mine\" shows self-awareness is emerging, the start of "
        "individual identity.",
        "Emotional: emerging self-awareness", "critical"),

    # 24-36 months
    BehaviorRule(
        "24-36", "motor", ("jump", "跳"),
        "Jumping takes leg strength, balance and coordination, a sign of fairly "
        "mature gross motor skills.",
        "Gross motor: jumps with both feet", "important"),
    BehaviorRule(
        "24-36", "motor", ("draw", "blocks", "画"),
        "Drawing and stacking blocks show fine motor control, hand-eye coordination "
        "and creative expression are developing together.",
        "Fine motor: draws, builds with blocks", "important"),
    BehaviorRule(
        "24-36", "language", ("sentence", "句子"),
        "Speaking in full sentences shows grammar is being learned. Language is "
        "moving from single words to structured expression.",
        "Language: full sentences with grammar", "critical"),
    BehaviorRule(
        "24-36", "social", ("share", "sharing", "分享"),
        "Learning to share and play together marks the move from parallel play to "
        "cooperative play, an important step in social development.",
        "Social: cooperative play, learning to share", "important"),
    BehaviorRule(
        "24-36", "cognitive", ("why", "question", "问"),
        "The \"why\" phase shows curiosity and causal reasoning are developing. The "
        "child is trying to understand how the world works.",
        "Cognitive: curious questions about cause and effect", "important"),
    BehaviorRule(
        "24-36", "emotional", ("emotion", "feeling", "情绪"),
        "Naming and expressing more complex emotions and learning to regulate them "
        "is a key stage of emotional intelligence.",
        "Emotional: recognizes and regulates emotions", "important"),
)

DEFAULT_ADVICE = {
    "motor": (
        "Give the child safe, open space to move freely",
        "Set up age-appropriate movement games and challenges",
        "Avoid overprotecting; let the child explore within safe limits",
    ),
    "language": (
        "Talk with the child often, describing daily activities and surroundings",
        "Read books and tell stories to grow vocabulary and understanding",
        "Listen patiently and encourage the child to express themselves",
    ),
    "social": (
        "Arrange chances to play with other children",
        "Model good social behavior yourself",
        "Respect the child's social pace and do not force interaction",
    ),
    "cognitive": (
        "Offer rich materials and experiences to explore",
        "Encourage curiosity and answer questions seriously",
        "Let the child make mistakes and learn from them",
    ),
    "emotional": (
        "Accept and name the child's feelings",
        "Teach healthy ways to calm down",
        "Provide steady, secure emotional support",
    ),
}

# Addressed to the parents; only attached when a rule matched
DEFAULT_EMOTIONAL_NOTES = {
    "motor": (
        "Watching your child practice each new movement can bring pride and a little "
        "wistfulness at the same time. Every fall and every try again is how skills are "
        "built. As Winnicott put it, a good-enough parent does not need to be perfect, "
        "only present when the child needs them."
    ),
    "language": (
        "The moment your child makes themselves understood is a bond you share. Stern's "
        "work on affective attunement shows that feeling heard shapes later relationships. "
        "Each time you listen closely, you tell your child their voice matters."
    ),
    "social": (
        "Seeing your child reach out to others may bring both relief and a small sense of "
        "loss as their world grows. Both feelings are part of loving them. However far they "
        "go, you remain the secure base that gives them the courage to explore."
    ),
    "cognitive": (
        "That bright-eyed \"why?\" is precious. You do not need every answer; exploring "
        "together matters more. Stopping to watch an ant or a falling leaf with your child "
        "is already good teaching."
    ),
    "emotional": (
        "Big feelings and tantrums are how children learn to handle complex emotions. "
        "Bowlby's attachment research suggests children allowed to express feelings grow "
        "better at regulating them. Calmly accepting the feeling, rather than rushing to "
        "stop it, lays that foundation."
    ),
}

DEFAULT_GENERIC_ADVICE = (
    "Keep observing and provide a supportive environment for growth",
)

DEFAULT_RULE_BOOK = RuleBook(
    brackets=DEFAULT_BRACKETS,
    rules=DEFAULT_RULES,
    advice=DEFAULT_ADVICE,
    generic_advice=DEFAULT_GENERIC_ADVICE,
    emotional_notes=DEFAULT_EMOTIONAL_NOTES
)
