"""
English pluralization service for resource type names.

This module converts the singular, lower case names of resource types (for
example "cluster" or "hostclass") into the plural names that users type on the
command line ("clusters", "hostclasses").
"""


class PluralizationService:
    """
    Service for pluralizing English nouns used as resource names.

    Resource names are message names in lower case, so compound names like
    "clustertemplate" are a single word. Only the ending of the word matters.
    """

    # Irregular endings, matched against the end of the word
    IRREGULAR_MAP = {
        "person": "people",
        "child": "children",
        "foot": "feet",
        "tooth": "teeth",
        "mouse": "mice",
        "index": "indices",
        "matrix": "matrices",
        "vertex": "vertices",
        "criterion": "criteria",
        "quiz": "quizzes",
    }

    # Words that have the same form in singular and plural
    UNCOUNTABLE = {
        "equipment",
        "information",
        "metadata",
        "data",
        "series",
        "species",
        "news",
        "sheep",
        "fish",
        "wildlife",
    }

    # Words ending in "f"/"fe" that become "ves"
    VES_WORDS = {"leaf", "life", "knife", "wife", "half", "shelf", "self", "wolf"}

    # Words ending in "o" that take "es"
    OES_WORDS = {"hero", "potato", "tomato", "echo", "veto", "torpedo"}

    VOWELS = "aeiou"

    def pluralize(self, word: str) -> str:
        """
        Pluralize an English noun.

        The result is in lower case, since resource names are compared
        without regard to case.

        Args:
            word: The singular form of the word

        Returns:
            The plural form of the word

        Examples:
            >>> service = PluralizationService()
            >>> service.pluralize("cluster")
            'clusters'
            >>> service.pluralize("hostclass")
            'hostclasses'
            >>> service.pluralize("policy")
            'policies'
        """
        word = word.lower()
        if not word:
            return word

        for ending in self.UNCOUNTABLE:
            if word.endswith(ending):
                return word

        for singular, plural in self.IRREGULAR_MAP.items():
            if word.endswith(singular):
                return word[: -len(singular)] + plural

        for singular in self.VES_WORDS:
            if word.endswith(singular):
                stem = word[:-2] if singular.endswith("fe") else word[:-1]
                return f"{stem}ves"

        if word.endswith(tuple(self.OES_WORDS)):
            return f"{word}es"

        if word.endswith(("s", "x", "z", "ch", "sh")):
            return f"{word}es"

        # "policy" -> "policies", but "gateway" -> "gateways"
        if word.endswith("y") and len(word) > 1 and word[-2] not in self.VOWELS:
            return f"{word[:-1]}ies"

        return f"{word}s"
