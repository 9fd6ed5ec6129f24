from __future__ import annotations

from typing import Any


def default_content() -> dict[str, Any]:
    """
    Skeleton document used on first boot (or when the backing store is empty).

    Object sections:  hero, about, contact
    Array sections:   everything else (items carry an "id")
    """
    return {
        "hero": {
            "title": "Artist Name",
            "subtitle": "Singer | Performer | Playback Artist",
            "backgroundImage": "",
            "ctaText": "Listen Now",
            "ctaLink": "#music",
        },
        "about": {
            "title": "About Me",
            "description": "",
            "image": "",
            "stats": [],
        },
        "featureStats": [],
        "musicReleases": [],
        "events": [],
        "gallery": [],
        "testimonials": [],
        "contact": {
            "email": "",
            "phone": "",
            "location": "",
        },
        "socialLinks": [],
        "journeyMilestones": [],
    }
