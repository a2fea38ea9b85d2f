"""Static catalog of featured destinations.

Destinations are not stored in the database. A destination page pulls in
posts mentioning any of its keywords and listings located in it.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import desc, or_
from sqlmodel import Session, select

from travelblog.models.blog import BlogPost
from travelblog.models.directory import DirectoryListing
from travelblog.services.blog import visible_condition


@dataclass(frozen=True)
class Highlight:
    name: str
    description: str


@dataclass(frozen=True)
class Destination:
    slug: str
    name: str
    region: str
    description: str
    image: str
    keywords: Tuple[str, ...]
    best_time_to_visit: str
    highlights: Tuple[Highlight, ...] = field(default_factory=tuple)

    # Matched against DirectoryListing.location
    @property
    def location(self) -> str:
        return self.keywords[0]


DESTINATIONS: List[Destination] = [
    Destination(
        slug="sydney",
        name="Sydney",
        region="New South Wales",
        description="Australia's iconic harbor city with the Opera House, Harbour Bridge, and beautiful beaches like Bondi and Manly.",
        image="/static/images/destinations/sydney.jpg",
        keywords=("Sydney", "Opera House", "Harbour Bridge", "Bondi Beach", "New South Wales"),
        best_time_to_visit="September to November and March to May offer pleasant temperatures and fewer crowds.",
        highlights=(
            Highlight("Sydney Opera House", "Iconic architectural masterpiece and performing arts venue."),
            Highlight("Sydney Harbour Bridge", "Famous steel arch bridge offering bridge climbs and panoramic views."),
            Highlight("Bondi Beach", "Iconic beach known for its golden sand, surfing, and coastal walks."),
            Highlight("Taronga Zoo", "Zoo with Australian and exotic animals with spectacular harbour views."),
            Highlight("The Rocks", "Historic area with cobblestone streets, markets, and colonial-era buildings."),
        ),
    ),
    Destination(
        slug="melbourne",
        name="Melbourne",
        region="Victoria",
        description="Cultural capital known for its coffee scene, laneways, street art, and sporting events like the Australian Open.",
        image="/static/images/destinations/melbourne.jpg",
        keywords=("Melbourne", "Victoria", "Laneways", "Coffee", "Great Ocean Road"),
        best_time_to_visit="March to May and September to November for mild weather and fewer tourists.",
        highlights=(
            Highlight("Melbourne Laneways", "Graffiti-decorated alleyways filled with cafes, bars, and boutiques."),
            Highlight("Federation Square", "Modern piazza and cultural center with museums and events."),
            Highlight("Queen Victoria Market", "Historic market selling fresh produce, specialty foods, and crafts."),
            Highlight("Royal Botanic Gardens", "Extensive gardens featuring thousands of plant species and Aboriginal heritage walks."),
            Highlight("Great Ocean Road", "Scenic coastal drive with the famous Twelve Apostles rock formations."),
        ),
    ),
    Destination(
        slug="gold-coast",
        name="Gold Coast",
        region="Queensland",
        description="Famous for its long sandy beaches, surfing spots, theme parks, and vibrant nightlife.",
        image="/static/images/destinations/gold-coast.jpg",
        keywords=("Gold Coast", "Queensland", "Surfers Paradise", "Theme Parks", "Beaches"),
        best_time_to_visit="April to May and September to October for pleasant temperatures and fewer crowds.",
        highlights=(
            Highlight("Surfers Paradise Beach", "Iconic stretch of golden sand with high-rise backdrop and vibrant atmosphere."),
            Highlight("Theme Parks", "Home to major attractions including Dreamworld, Movie World, and Sea World."),
            Highlight("Burleigh Heads", "Popular surfing spot with national park, offering coastal walks and wildlife."),
            Highlight("Gold Coast Hinterland", "Subtropical rainforest with walking trails, waterfalls, and stunning views."),
            Highlight("Broadbeach", "Sophisticated dining precinct with restaurants, cafes, and entertainment venues."),
        ),
    ),
    Destination(
        slug="cairns",
        name="Cairns & Great Barrier Reef",
        region="Queensland",
        description="Gateway to the Great Barrier Reef and Daintree Rainforest, perfect for diving and tropical adventures.",
        image="/static/images/destinations/cairns.jpg",
        keywords=("Cairns", "Great Barrier Reef", "Daintree", "Port Douglas", "Snorkelling"),
        best_time_to_visit="June to October brings dry weather and the clearest water on the reef.",
        highlights=(
            Highlight("Great Barrier Reef", "The world's largest coral reef system, best explored by boat, snorkel or dive."),
            Highlight("Daintree Rainforest", "Ancient tropical rainforest meeting the reef at Cape Tribulation."),
            Highlight("Kuranda Scenic Railway", "Historic train ride through the rainforest to the village of Kuranda."),
            Highlight("Cairns Esplanade", "Waterfront lagoon, boardwalk and night markets."),
        ),
    ),
    Destination(
        slug="uluru",
        name="Uluru-Kata Tjuta",
        region="Northern Territory",
        description="Sacred Aboriginal site featuring the massive red monolith, stunning sunsets, and ancient cultural history.",
        image="/static/images/destinations/uluru.jpg",
        keywords=("Uluru", "Kata Tjuta", "Red Centre", "Outback", "Northern Territory"),
        best_time_to_visit="May to September, when days are warm and nights are cool.",
        highlights=(
            Highlight("Uluru Base Walk", "A 10km loop around the monolith past waterholes and rock art."),
            Highlight("Kata Tjuta", "Domed rock formations with the Valley of the Winds walk."),
            Highlight("Field of Light", "Large scale light installation viewed at dusk."),
            Highlight("Cultural Centre", "Anangu history, art and the stories of the land."),
        ),
    ),
    Destination(
        slug="tasmania",
        name="Tasmania",
        region="Tasmania",
        description="Island state with pristine wilderness, MONA museum, historic Port Arthur, and exceptional food scene.",
        image="/static/images/destinations/tasmania.jpg",
        keywords=("Tasmania", "Hobart", "MONA", "Port Arthur", "Cradle Mountain"),
        best_time_to_visit="December to March for long summer days, or June for the winter festivals.",
        highlights=(
            Highlight("MONA", "Museum of Old and New Art, reached by ferry from Hobart."),
            Highlight("Cradle Mountain", "Alpine lakes and the Overland Track."),
            Highlight("Port Arthur Historic Site", "Convict settlement ruins on the Tasman Peninsula."),
            Highlight("Wineglass Bay", "Perfect curve of white sand in Freycinet National Park."),
        ),
    ),
    Destination(
        slug="perth",
        name="Perth & Margaret River",
        region="Western Australia",
        description="Sunny city with beautiful beaches, Kings Park, and nearby wine region with world-class surfing.",
        image="/static/images/destinations/perth.jpg",
        keywords=("Perth", "Margaret River", "Rottnest Island", "Fremantle", "Western Australia"),
        best_time_to_visit="September to November for wildflowers and March to May for calm seas.",
        highlights=(
            Highlight("Kings Park", "Botanic gardens and city views over the Swan River."),
            Highlight("Rottnest Island", "Car-free island famous for quokkas and snorkelling bays."),
            Highlight("Fremantle", "Port town with markets, a historic prison and craft breweries."),
            Highlight("Margaret River", "Wineries, surf breaks and limestone caves."),
        ),
    ),
    Destination(
        slug="adelaide",
        name="Adelaide & Barossa Valley",
        region="South Australia",
        description="Elegant city surrounded by parklands, with nearby wine regions and Kangaroo Island wildlife.",
        image="/static/images/destinations/adelaide.jpg",
        keywords=("Adelaide", "Barossa", "Kangaroo Island", "McLaren Vale", "South Australia"),
        best_time_to_visit="March to May for the grape harvest and mild weather.",
        highlights=(
            Highlight("Barossa Valley", "One of Australia's best known wine regions."),
            Highlight("Kangaroo Island", "Wildlife, wild coastline and local produce."),
            Highlight("Adelaide Central Market", "Undercover market with over 70 traders."),
            Highlight("Glenelg", "Seaside suburb reached by tram from the city."),
        ),
    ),
]

_BY_SLUG = {d.slug: d for d in DESTINATIONS}


def get_destination(slug: str) -> Optional[Destination]:
    return _BY_SLUG.get(slug)


def destination_posts(session: Session, destination: Destination, limit: int = 6) -> List[BlogPost]:
    """Visible posts whose title or content mentions any keyword."""
    matches = []
    for keyword in destination.keywords:
        matches.append(BlogPost.title.ilike(f"%{keyword}%"))
        matches.append(BlogPost.content.ilike(f"%{keyword}%"))
    return session.exec(
        select(BlogPost)
        .where(visible_condition(), or_(*matches))
        .order_by(desc(BlogPost.published_at), desc(BlogPost.id))
        .limit(limit)
    ).all()


def destination_listings(session: Session, destination: Destination, limit: int = 8) -> List[DirectoryListing]:
    return session.exec(
        select(DirectoryListing)
        .where(DirectoryListing.location.ilike(f"%{destination.location}%"))
        .order_by(desc(DirectoryListing.featured), DirectoryListing.name)
        .limit(limit)
    ).all()
