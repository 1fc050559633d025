"""Seed landing page content, theme presets, settings, and sample API keys."""

from sqlalchemy.orm import Session

from monquest_cms.core.security import generate_api_key
from monquest_cms.models.content import Content, ContentType
from monquest_cms.models.site_config import ApiKey, ApiEnvironment, Setting, ThemePreset
from monquest_cms.models.user import User
from monquest_cms.services.audit_service import audit_service

DEFAULT_CONTENT = {
    ContentType.HERO: {
        "title": "MONQUEST",
        "subtitle": "Defend Your Kingdom in Epic Pixel-Art Tower Defense",
        "description": "Build towers, summon heroes, and conquer waves of monsters on the "
                       "Monad blockchain. Earn NFTs, collect rare items, and climb the leaderboard!",
        "ctaButtons": [
            {"id": "cta1", "text": "Play Now", "icon": "IoGameController",
             "variant": "primary", "link": "/play", "order": 0},
            {"id": "cta2", "text": "Learn More", "icon": "IoBook",
             "variant": "secondary", "link": "/docs", "order": 1},
        ],
        "stats": [
            {"id": "stat1", "value": "1000+", "label": "Players", "order": 0},
            {"id": "stat2", "value": "50+", "label": "Unique Towers", "order": 1},
            {"id": "stat3", "value": "100+", "label": "NFT Items", "order": 2},
            {"id": "stat4", "value": "24/7", "label": "Online", "order": 3},
        ],
    },
    ContentType.FEATURES: {
        "title": "Game Features",
        "subtitle": "Experience the ultimate tower defense adventure with blockchain technology",
        "items": [
            {"id": "1", "icon": "IoHome", "title": "Strategic Defense",
             "description": "Build and upgrade towers with unique abilities.",
             "color": "primary", "order": 0},
            {"id": "2", "icon": "IoShield", "title": "Epic Battles",
             "description": "Fight against waves of monsters with increasing difficulty.",
             "color": "secondary", "order": 1},
            {"id": "3", "icon": "IoColorPalette", "title": "Pixel-Art Beauty",
             "description": "Retro pixel-art graphics with smooth animations.",
             "color": "accent", "order": 2},
        ],
    },
    ContentType.HOW_IT_WORKS: {
        "title": "How It Works",
        "subtitle": "Start your adventure in just 4 simple steps",
        "steps": [
            {"id": "step1", "icon": "IoLink", "title": "Connect Wallet",
             "description": "Connect your Web3 wallet to access the game.", "color": "primary", "order": 0},
            {"id": "step2", "icon": "IoCompass", "title": "Choose Your Path",
             "description": "Select your starting hero and first tower NFTs.", "color": "secondary", "order": 1},
            {"id": "step3", "icon": "IoHammer", "title": "Build & Defend",
             "description": "Place towers and defend against monster waves.", "color": "accent", "order": 2},
            {"id": "step4", "icon": "IoArrowUp", "title": "Earn & Upgrade",
             "description": "Collect rewards, upgrade towers, mint rare items.", "color": "primary", "order": 3},
        ],
    },
    ContentType.ROADMAP: {
        "title": "Roadmap",
        "subtitle": "Our journey to build the ultimate tower defense game on Monad",
        "items": [
            {"id": "phase1", "phase": "Phase 1", "quarter": "Q1 2025", "title": "Foundation",
             "status": "completed", "color": "primary", "order": 0,
             "items": ["Concept & Design", "Smart Contract Development", "Website & dApp UI", "Testnet Deployment"]},
            {"id": "phase2", "phase": "Phase 2", "quarter": "Q2 2025", "title": "Alpha Launch",
             "status": "in-progress", "color": "secondary", "order": 1,
             "items": ["Mainnet Deployment", "Alpha Testing", "NFT Marketplace", "Community Building"]},
            {"id": "phase3", "phase": "Phase 3", "quarter": "Q3 2025", "title": "Beta & Expansion",
             "status": "upcoming", "color": "accent", "order": 2,
             "items": ["Public Beta Launch", "PvP Mode", "Tournaments", "Mobile Version"]},
            {"id": "phase4", "phase": "Phase 4", "quarter": "Q4 2025", "title": "Full Release",
             "status": "upcoming", "color": "primary", "order": 3,
             "items": ["Official Launch", "Cross-Chain Integration", "DAO Governance"]},
        ],
    },
    ContentType.FAQ: {
        "title": "FAQ",
        "subtitle": "Got questions? We've got answers!",
        "items": [
            {"id": "faq1", "question": "What is Monquest?",
             "answer": "A pixel-art tower defense game built on the Monad blockchain.",
             "color": "primary", "order": 0},
            {"id": "faq2", "question": "How do I start playing?",
             "answer": "Connect your Web3 wallet, mint your starter pack, and begin your adventure.",
             "color": "primary", "order": 1},
            {"id": "faq3", "question": "Are the NFTs tradeable?",
             "answer": "Yes. Towers, heroes, and items are NFTs you own and can trade.",
             "color": "primary", "order": 2},
        ],
    },
}

SYSTEM_PRESETS = [
    ("Default", "default", {"primary": "#4ADE80", "secondary": "#60A5FA", "accent": "#FB923C",
                            "dark": "#1E293B", "darker": "#0F172A", "light": "#F1F5F9"}),
    ("Cyberpunk", "cyberpunk", {"primary": "#FF0080", "secondary": "#00FFFF", "accent": "#FFFF00",
                                "dark": "#0D001A", "darker": "#050008", "light": "#E0E0FF"}),
    ("Ocean", "ocean", {"primary": "#06B6D4", "secondary": "#3B82F6", "accent": "#10B981",
                        "dark": "#0C4A6E", "darker": "#082F49", "light": "#E0F2FE"}),
    ("Sunset", "sunset", {"primary": "#F59E0B", "secondary": "#EF4444", "accent": "#EC4899",
                          "dark": "#451A03", "darker": "#1C0A00", "light": "#FEF3C7"}),
]


def seed_sample_data(db: Session) -> None:
    """Insert content sections, theme presets, settings and sample API keys."""

    owner = db.query(User).first()
    if not owner:
        print("⚠️  No users found. Run seed_super_admin first.")
        return

    # --- Content ---
    for content_type, data in DEFAULT_CONTENT.items():
        existing = db.query(Content).filter(Content.type == content_type).first()
        if not existing:
            db.add(Content(type=content_type, data=data))

    # --- Theme presets ---
    for name, slug, colors in SYSTEM_PRESETS:
        existing = db.query(ThemePreset).filter(ThemePreset.slug == slug).first()
        if not existing:
            db.add(ThemePreset(name=name, slug=slug, colors=colors, is_system=True))

    # --- Settings ---
    default_settings = [
        ("active_theme_preset", {"slug": "default"}, "appearance", "Currently active theme preset slug"),
        ("site_name", "MonQuest", "general", "Site name shown in the navbar and title"),
        ("maintenance_mode", False, "general", "Show the maintenance page to visitors"),
    ]
    for key, value, category, desc in default_settings:
        existing = db.query(Setting).filter(Setting.key == key).first()
        if not existing:
            db.add(Setting(key=key, value=value, category=category, description=desc))

    # --- Sample API keys ---
    if db.query(ApiKey).count() == 0:
        for name, env in (
            ("Production API Key", ApiEnvironment.PRODUCTION),
            ("Development API Key", ApiEnvironment.DEVELOPMENT),
        ):
            db.add(ApiKey(name=name, key=generate_api_key(env.value), environment=env, user_id=owner.id))

    db.commit()
    audit_service.record(
        db, "created", "database", user_id=owner.id, resource_id="seed",
        details={"message": "Initial database seed completed"},
    )
    print("✅ Seeded content, theme presets, settings, and sample API keys")
