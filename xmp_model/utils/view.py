# xmp_model/utils/view.py
from typing import Optional

from ..models.values import (
    X_DEFAULT,
    LanguageAlternative,
    OpaqueValue,
    OrderedList,
    PropertyValue,
    Scalar,
    UnorderedList,
)


class ScalarViewPolicy:
    """
    Presentation policy turning any property value into one editable string

    Ordered list items are numbered by default ("1) Wilber, 2) Wilma"),
    unordered list items are only joined.
    """

    def __init__(self, ordered_format: str = "{index}) {text}",
                 unordered_format: str = "{text}",
                 separator: str = ", ",
                 language: str = X_DEFAULT):
        """
        Initialize the policy

        Args:
            ordered_format: Format for one Seq item, receives index (1-based) and text
            unordered_format: Format for one Bag item, receives index and text
            separator: String placed between formatted items
            language: Preferred language for alternatives, falls back to x-default
        """
        self.ordered_format = ordered_format
        self.unordered_format = unordered_format
        self.separator = separator
        self.language = language

    def render(self, value: PropertyValue) -> Optional[str]:
        """
        Build the scalar view of a value

        Args:
            value: Property value to present

        Returns:
            str or None: Presentation string, None for unsupported values
        """
        if isinstance(value, Scalar):
            return value.text
        if isinstance(value, LanguageAlternative):
            text = value.lookup(self.language)
            return text if text is not None else ''
        if isinstance(value, OrderedList):
            return self._join(value, self.ordered_format)
        if isinstance(value, UnorderedList):
            return self._join(value, self.unordered_format)
        if isinstance(value, OpaqueValue):
            return ' '.join(value.texts())
        return None

    def _join(self, items, item_format: str) -> str:
        return self.separator.join(item_format.format(index=index, text=text)
                                   for index, text in enumerate(items, 1))
