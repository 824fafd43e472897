from typing import List

from .models import Book, BookTranslation, Language, User

BOOKS_KEY = "books"
USER_KEY = "currentUser"

LANGUAGES: List[Language] = [
    Language(code="en", name="English", native_name="English"),
    Language(code="es", name="Spanish", native_name="Español"),
    Language(code="fr", name="French", native_name="Français"),
    Language(code="de", name="German", native_name="Deutsch"),
    Language(code="it", name="Italian", native_name="Italiano"),
    Language(code="zh", name="Chinese", native_name="中文"),
    Language(code="ja", name="Japanese", native_name="日本語"),
]


def seed_books() -> List[Book]:
    """The built-in sample set written to empty storage. Fresh objects on every call."""
    return [
        Book(
            id="1",
            title="The Art of Programming",
            author="John Smith",
            description="A comprehensive guide to modern programming techniques and best practices.",
            summary=(
                "This book covers fundamental programming concepts, design patterns, and advanced "
                "techniques used in software development. Perfect for both beginners and "
                "experienced developers."
            ),
            languages=["en", "es", "fr"],
            translations={
                "es": BookTranslation(
                    title="El Arte de la Programación",
                    description="Una guía completa de técnicas de programación modernas y mejores prácticas.",
                    summary=(
                        "Este libro cubre conceptos fundamentales de programación, patrones de diseño "
                        "y técnicas avanzadas utilizadas en el desarrollo de software."
                    ),
                ),
                "fr": BookTranslation(
                    title="L'Art de la Programmation",
                    description="Un guide complet des techniques de programmation modernes et des meilleures pratiques.",
                    summary=(
                        "Ce livre couvre les concepts fondamentaux de programmation, les modèles de "
                        "conception et les techniques avancées utilisées dans le développement logiciel."
                    ),
                ),
            },
            price=29.99,
        ),
        Book(
            id="2",
            title="Digital Marketing Mastery",
            author="Sarah Johnson",
            description="Master the art of digital marketing in the modern age.",
            summary=(
                "Learn how to create effective digital marketing campaigns, understand analytics, "
                "and grow your online presence through proven strategies."
            ),
            languages=["en", "de", "it"],
            translations={
                "de": BookTranslation(
                    title="Digitales Marketing Meisterschaft",
                    description="Meistern Sie die Kunst des digitalen Marketings im modernen Zeitalter.",
                    summary=(
                        "Lernen Sie, wie Sie effektive digitale Marketingkampagnen erstellen, Analysen "
                        "verstehen und Ihre Online-Präsenz durch bewährte Strategien ausbauen."
                    ),
                ),
                "it": BookTranslation(
                    title="Padronanza del Marketing Digitale",
                    description="Padroneggia l'arte del marketing digitale nell'era moderna.",
                    summary=(
                        "Impara come creare campagne di marketing digitale efficaci, comprendere le "
                        "analisi e far crescere la tua presenza online attraverso strategie comprovate."
                    ),
                ),
            },
            price=24.99,
        ),
        Book(
            id="3",
            title="Mindful Living",
            author="Dr. Emily Chen",
            description="A guide to living mindfully in a busy world.",
            summary=(
                "Discover practical techniques for mindfulness, stress reduction, and finding balance "
                "in your daily life through ancient wisdom and modern science."
            ),
            languages=["en", "zh", "ja"],
            translations={
                "zh": BookTranslation(
                    title="正念生活",
                    description="在忙碌世界中正念生活的指南。",
                    summary="通过古老智慧和现代科学，发现正念、减压和在日常生活中找到平衡的实用技巧。",
                ),
                "ja": BookTranslation(
                    title="マインドフルな生活",
                    description="忙しい世界でマインドフルに生きるためのガイド。",
                    summary=(
                        "古代の知恵と現代科学を通じて、マインドフルネス、ストレス軽減、"
                        "日常生活でのバランスを見つけるための実践的なテクニックを発見してください。"
                    ),
                ),
            },
            price=19.99,
            is_purchased=True,
            is_in_library=True,
        ),
    ]


def default_user() -> User:
    return User(
        id="1",
        email="user@example.com",
        name="Demo User",
        type="reader",
        purchased_books=["3"],
        personal_library=["3"],
    )
