"""
Keyword catalogues used by the feature vectorizer and the labeler.

Everything here is plain data. Order matters: topic and semantic entries map
to fixed feature slots in catalogue order, and label categories break score
ties in catalogue order. Pass replacement catalogues to FeatureVectorizer or
ClusterLabeler to extend or swap them.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Tuple


# Topic name -> case-insensitive regex patterns; every match counts.
TOPIC_PATTERNS: Dict[str, List[str]] = {
    "Machine Learning": [
        r"\b(machine learning|ml|artificial intelligence|ai|neural network|deep learning|"
        r"supervised|unsupervised|reinforcement learning|algorithm|model training|prediction|"
        r"classification|regression)\b",
    ],
    "Natural Language Processing": [
        r"\b(nlp|natural language processing|text analysis|sentiment analysis|language model|"
        r"tokenization|parsing|linguistics|text mining|speech recognition)\b",
    ],
    "Web Development": [
        r"\b(web development|frontend|backend|html|css|javascript|react|angular|vue|node\.?js|"
        r"api|rest|graphql|responsive design)\b",
    ],
    "Data Science": [
        r"\b(data science|data analysis|statistics|visualization|pandas|numpy|python|"
        r"r programming|big data|analytics|insights)\b",
    ],
    "Software Engineering": [
        r"\b(software engineering|programming|coding|development|software architecture|"
        r"design patterns|testing|debugging|version control|git)\b",
    ],
    "Database": [
        r"\b(database|sql|nosql|mongodb|postgresql|mysql|data storage|query|indexing|"
        r"normalization|crud operations)\b",
    ],
    "Business": [
        r"\b(business|strategy|management|marketing|sales|revenue|profit|customer|market|"
        r"competition|growth)\b",
    ],
    "Finance": [
        r"\b(finance|financial|investment|banking|trading|portfolio|risk|return|economics|"
        r"market analysis)\b",
    ],
    "Healthcare": [
        r"\b(healthcare|medical|health|patient|clinical|diagnosis|treatment|therapy|medicine|"
        r"pharmaceutical)\b",
    ],
    "Education": [
        r"\b(education|learning|teaching|academic|curriculum|student|instructor|course|"
        r"training|knowledge)\b",
    ],
    "Food & Cooking": [
        r"\b(cooking|recipe|recipes|bake|baking|oven|flour|sugar|butter|garlic|onion|sauce|"
        r"pasta|soup|dough|ingredient|ingredients|kitchen|chef|simmer|roast|dessert)\b",
    ],
    "Sports": [
        r"\b(sports?|football|soccer|basketball|baseball|tennis|golf|hockey|league|"
        r"championship|tournament|coach|player|players|team|match|goal|season)\b",
    ],
}

# Seed concept -> related terms. The seed scores 2, each related term 1.
SEMANTIC_RELATIONSHIPS: Dict[str, List[str]] = {
    "algorithm": ["method", "technique", "approach", "procedure", "process", "strategy"],
    "programming": ["coding", "development", "software", "computer", "technology"],
    "machine learning": ["ai", "artificial intelligence", "neural network", "deep learning", "data science"],
    "nlp": ["natural language processing", "text analysis", "linguistics", "language model"],
    "database": ["data", "storage", "sql", "query", "information"],
    "web": ["internet", "website", "online", "browser", "html", "css", "javascript"],
    "business": ["company", "enterprise", "organization", "corporate", "commercial"],
    "finance": ["money", "financial", "economic", "investment", "banking"],
    "research": ["study", "analysis", "investigation", "experiment", "academic"],
    "science": ["scientific", "theory", "hypothesis", "methodology", "empirical"],
}


@dataclass(frozen=True)
class LabelCategory:
    """A display label and the keywords that vote for it."""

    name: str
    label: str
    keywords: Tuple[str, ...]


LABEL_CATEGORIES: Tuple[LabelCategory, ...] = (
    LabelCategory(
        "Sports", "Sports",
        ("sports", "game", "team", "player", "match", "win", "coach", "league", "championship",
         "score", "football", "basketball", "baseball", "soccer", "tennis", "golf", "hockey",
         "athletic", "tournament"),
    ),
    LabelCategory(
        "Food & Cooking", "Food & Cooking",
        ("cooking", "recipe", "bake", "baking", "oven", "flour", "ingredient", "kitchen",
         "chef", "sauce", "pasta", "dessert"),
    ),
    LabelCategory(
        "Machine Learning", "Machine Learning & AI",
        ("machine learning", "algorithm", "model", "training", "neural", "network",
         "deep learning", "classification", "regression", "prediction", "ai",
         "artificial intelligence", "learning"),
    ),
    LabelCategory(
        "Natural Language Processing", "Natural Language Processing",
        ("nlp", "natural language", "text", "language", "embedding", "sentiment",
         "tokenization", "parsing", "word", "corpus"),
    ),
    LabelCategory(
        "Web Development", "Web Development",
        ("web", "html", "css", "javascript", "react", "frontend", "backend", "api", "server",
         "client", "browser", "http", "node"),
    ),
    LabelCategory(
        "Data Science", "Data Science & Analytics",
        ("data", "analysis", "statistics", "visualization", "dataset", "processing", "pandas",
         "numpy", "matplotlib", "analytics"),
    ),
    LabelCategory(
        "Computer Vision", "Computer Vision",
        ("image", "vision", "computer vision", "detection", "recognition", "cnn", "visual",
         "pixel", "convolutional"),
    ),
    LabelCategory(
        "Cloud & DevOps", "Cloud & DevOps",
        ("cloud", "docker", "kubernetes", "deployment", "aws", "azure", "infrastructure",
         "devops", "container"),
    ),
    LabelCategory(
        "Database", "Database & Storage",
        ("database", "sql", "nosql", "mongodb", "postgresql", "query", "table", "index",
         "schema"),
    ),
    LabelCategory(
        "Security", "Security & Encryption",
        ("security", "encryption", "authentication", "authorization", "vulnerability",
         "cryptography", "password", "firewall"),
    ),
    LabelCategory(
        "Finance", "Finance & Trading",
        ("finance", "money", "bank", "investment", "stock", "trading", "market", "price",
         "financial"),
    ),
    LabelCategory(
        "Healthcare", "Healthcare & Medicine",
        ("health", "medical", "disease", "treatment", "hospital", "doctor", "patient",
         "medicine", "therapy", "clinical"),
    ),
    LabelCategory(
        "Education", "Education & Learning",
        ("education", "learning", "student", "teacher", "school", "university", "course",
         "lesson", "academic"),
    ),
)

STOP_WORDS: FrozenSet[str] = frozenset("""
a about above after again against all am an and any are aren't as at be because been
before being below between both but by can't cannot could couldn't did didn't do does
doesn't doing don't down during each few for from further had hadn't has hasn't have
haven't having he he'd he'll he's her here here's hers herself him himself his how how's
i i'd i'll i'm i've if in into is isn't it it's its itself let's me more most mustn't my
myself no nor not of off on once only or other ought our ours ourselves out over own same
shan't she she'd she'll she's should shouldn't so some such than that that's the their
theirs them themselves then there there's these they they'd they'll they're they've this
those through to too under until up very was wasn't we we'd we'll we're we've were weren't
what what's when when's where where's which while who who's whom why why's with won't
would wouldn't you you'd you'll you're you've your yours yourself yourselves
""".split())
