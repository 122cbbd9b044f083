"""Game catalogue shipped with the platform.

Each entry is keyed by its `slug`; artwork paths point at static assets served
by the web frontend.
"""

GAMES = [
    {
        "id": "cs-2",
        "name": "CS 2",
        "slug": "cs-2",
        "image_url": "/images/games/cs-2.jpg",
        "logo_url": "/images/gamesLogo/cs2.webp",
        "poster_url": "/images/gamesPoster/cs2.webp",
    },
    {
        "id": "valorant",
        "name": "Valorant",
        "slug": "valorant",
        "image_url": "/images/games/valorant.jpg",
        "logo_url": "/images/gamesLogo/valorant.png",
        "poster_url": "/images/gamesPoster/valorant.webp",
    },
    {
        "id": "rocket-league",
        "name": "Rocket League",
        "slug": "rocket-league",
        "image_url": "/images/games/rocket-league.jpg",
        "logo_url": "/images/gamesLogo/rocket-league.webp",
        "poster_url": "/images/gamesPoster/rocket-league.webp",
    },
    {
        "id": "league-of-legends",
        "name": "League of Legends",
        "slug": "league-of-legends",
        "image_url": "/images/games/league-of-legends.jpg",
        "logo_url": "/images/gamesLogo/league-of-legends.png",
        "poster_url": "/images/gamesPoster/league-of-legends.webp",
    },
    {
        "id": "dota-2",
        "name": "Dota 2",
        "slug": "dota-2",
        "image_url": "/images/games/dota-2.jpg",
        "logo_url": "/images/gamesLogo/dota-2.png",
        "poster_url": "/images/gamesPoster/dota-2.webp",
    },
    {
        "id": "street-fighter-6",
        "name": "Street Fighter 6",
        "slug": "street-fighter-6",
        "image_url": "/images/games/street-fighter-6.png",
        "logo_url": "/images/gamesLogo/street-fighter-6.png",
        "poster_url": "/images/gamesPoster/street-fighter-6.webp",
    },
    {
        "id": "fortnite",
        "name": "Fortnite",
        "slug": "fortnite",
        "image_url": "/images/games/fortnite.jpg",
        "logo_url": "/images/gamesLogo/fortnite.png",
        "poster_url": "/images/gamesPoster/fortnite.webp",
    },
    {
        "id": "pubg",
        "name": "PUBG",
        "slug": "pubg",
        "image_url": "/images/games/pubg.jpg",
        "logo_url": "/images/gamesLogo/pubg.png",
        "poster_url": "/images/gamesPoster/pubg.webp",
    },
    {
        "id": "apex-legends",
        "name": "Apex Legends",
        "slug": "apex-legends",
        "image_url": "/images/games/apex-legends.jpg",
        "logo_url": "/images/gamesLogo/apex.png",
        "poster_url": "/images/gamesPoster/apex-legends.webp",
    },
    {
        "id": "call-of-duty-7",
        "name": "Call of Duty 7",
        "slug": "call-of-duty-7",
        "image_url": "/images/games/call-of-duty-7.jpg",
        "logo_url": "/images/gamesLogo/call-of-duty-7.png",
        "poster_url": "/images/gamesPoster/call-of-duty-bo-7.webp",
    },
]
