import structlog

logger = structlog.get_logger(__name__)


class SpeakerAnonymizer:
    """Map real speaker names to stable anonymized labels.

    One instance covers exactly one file. Labels are either sequential
    participant IDs ("P1", "P2", ...) in first-seen order, or initials
    ("JS", "J1") with a numeric suffix appended on collision ("JS2").
    """

    PARTICIPANT_PREFIX = "P"

    def __init__(self, use_participant_ids: bool = True):
        self.use_participant_ids = use_participant_ids
        self.mapping: dict[str, str] = {}
        # Labels produced here, used for "(anonymized)" annotations
        self.labels: set[str] = set()

    def anonymize(self, name: str) -> str:
        """Return the label for ``name``, creating one on first sight."""
        original = name.strip() if name else ""
        if not original:
            raise ValueError("Speaker name must be a non-empty string")

        existing = self.mapping.get(original)
        if existing is not None:
            return existing

        if self.use_participant_ids:
            label = f"{self.PARTICIPANT_PREFIX}{len(self.mapping) + 1}"
        else:
            label = self._unique(self.initials(original))

        self.mapping[original] = label
        self.labels.add(label)

        logger.debug(
            "Assigned anonymized label",
            label=label,
            speaker_index=len(self.mapping),
            mode="participant_id" if self.use_participant_ids else "initials",
        )
        return label

    @staticmethod
    def initials(name: str) -> str:
        """Build the initials label for a whitespace-separated name.

        "Sarah" -> "S1", "John Smith" -> "JS", "Mary Ann Lee" -> "ML"
        """
        tokens = name.split()
        if len(tokens) == 1:
            return tokens[0][0].upper() + "1"
        return tokens[0][0].upper() + tokens[-1][0].upper()

    def _unique(self, base: str) -> str:
        if base not in self.labels:
            return base
        suffix = 2
        while f"{base}{suffix}" in self.labels:
            suffix += 1
        return f"{base}{suffix}"
