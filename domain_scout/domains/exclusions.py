# File: domain_scout/domains/exclusions.py
"""domain_scout.domains.exclusions: Фильтр общеизвестных платформ и служебных TLD."""

from __future__ import annotations

from typing import Iterable

__all__ = ("DEFAULT_EXCLUDED_DOMAINS", "EXCLUDED_TLDS", "SUSPECT_DOMAIN_LABELS", "should_exclude")

DEFAULT_EXCLUDED_DOMAINS = frozenset(
    {
        # поисковики, соцсети, крупные платформы
        "google.com", "youtube.com", "facebook.com", "twitter.com", "x.com",
        "instagram.com", "linkedin.com", "pinterest.com", "reddit.com",
        "wikipedia.org", "amazon.com", "apple.com", "microsoft.com",
        "github.com", "wordpress.org", "wordpress.com", "w3.org",
        "schema.org", "gravatar.com",
        # CDN
        "googleapis.com", "gstatic.com", "cloudflare.com", "cdn.jsdelivr.net", "unpkg.com",
        # медиа
        "vimeo.com", "dailymotion.com", "soundcloud.com",
        "flickr.com", "imgur.com", "giphy.com", "tenor.com",
        "spotify.com", "tiktok.com", "twitch.tv", "discord.com", "discord.gg",
        "medium.com", "substack.com", "tumblr.com",
        # платежи и e-commerce
        "paypal.com", "stripe.com", "shopify.com",
        "ebay.com", "etsy.com", "walmart.com", "target.com", "aliexpress.com",
        "bandcamp.com", "reverb.com",
        # сокращатели ссылок
        "t.co", "bit.ly", "goo.gl", "tinyurl.com", "ow.ly", "buff.ly",
        # партнёрские сети и рассылки
        "pxf.io", "sjv.io", "jdoqocy.com", "tkqlhce.com", "dpbolvw.net",
        "anrdoezrs.net", "kqzyfj.com", "avantlink.com", "shareasale.com",
        "awin1.com", "impact.com", "mailchi.mp", "mailchimp.com",
        # хостинг и конструкторы сайтов
        "godaddy.com", "namecheap.com", "bluehost.com", "hostgator.com",
        "squarespace.com", "wix.com", "weebly.com", "netlify.com",
        "herokuapp.com", "vercel.app", "pages.dev",
    }
)

EXCLUDED_TLDS = (".edu", ".gov", ".mil", ".int")

#: Короткие метки, похожие на коды стран; такой «домен» почти всегда часть суффикса.
SUSPECT_DOMAIN_LABELS = frozenset(
    {
        "co", "or", "ac", "go", "ne", "us", "eu", "uk", "de", "fr", "jp", "cn",
        "au", "nz", "za", "br", "in", "kr", "ru", "it", "es", "nl", "se", "no",
        "fi", "dk", "at", "ch", "be", "pt", "pl", "cz", "ie", "il", "mx", "ar", "cl",
    }
)


def should_exclude(domain: str, extra: Iterable[str] = ()) -> bool:
    """True, если домен в исключённом TLD или совпадает/вложен в домен из списка."""
    d = domain.lower().rstrip(".")
    if d.endswith(EXCLUDED_TLDS):
        return True
    for excluded in DEFAULT_EXCLUDED_DOMAINS.union(e.lower() for e in extra):
        if d == excluded or d.endswith("." + excluded):
            return True
    return False
