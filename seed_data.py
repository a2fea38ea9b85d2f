from fastapi import HTTPException
from sqlmodel import Session, select

from travelblog.core.config import settings
from travelblog.db.session import engine, create_db_and_tables
from travelblog.models.admin_user import AdminRole
from travelblog.models.blog import BlogPost
from travelblog.schemas import ListingCreate, PostCreate, TermCreate
from travelblog.services.auth import AuthService
from travelblog.services.blog import BlogService
from travelblog.services.directory import DirectoryService
from travelblog.services.integration import IntegrationService


def seed_admin(session: Session):
    service = AuthService(session)
    try:
        service.create_admin(
            settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
            name=settings.ADMIN_NAME,
            role=AdminRole.SUPER_ADMIN,
        )
        print(f"Created super admin {settings.ADMIN_EMAIL}")
    except HTTPException as e:
        print(f"Skipping admin: {e.detail}")
    return service.get_user_by_email(settings.ADMIN_EMAIL)


def seed_content():
    print("Creating database and tables...")
    create_db_and_tables()

    with Session(engine) as session:
        admin = seed_admin(session)

        existing_posts = session.exec(select(BlogPost)).all()
        if existing_posts:
            print(f"Database already contains {len(existing_posts)} posts. Skipping seed.")
            return

        blog = BlogService(session)
        directory = DirectoryService(session)

        print("Seeding blog categories and tags...")
        guides = blog.create_category(TermCreate(name="Travel Guides", description="In-depth guides to Australian cities and regions."))
        food = blog.create_category(TermCreate(name="Food & Drink", description="Where to eat and drink around Australia."))
        outdoors = blog.create_category(TermCreate(name="Outdoors", description="Hikes, reefs, beaches and national parks."))

        tags = {name: blog.create_tag(TermCreate(name=name)) for name in ["Beaches", "Coffee", "Hiking", "Reef", "Road Trip"]}

        print("Seeding blog posts...")
        posts = [
            blog.create_post(PostCreate(
                title="48 Hours in Sydney",
                excerpt="Harbour walks, ferry rides and the best of Bondi in a single weekend.",
                content="<p>Start at Circular Quay, catch the ferry to Manly, and finish with a sunset walk from Bondi to Coogee.</p>",
                featured_image="https://images.unsplash.com/photo-1506973035872-a4ec16b8e8d9",
                category_id=guides.id,
                tags=[tags["Beaches"].id],
                published=True,
            ), author_id=admin.id if admin else None),
            blog.create_post(PostCreate(
                title="Melbourne's Laneway Coffee Crawl",
                excerpt="Six espresso bars tucked down Melbourne's famous laneways.",
                content="<p>Degraves Street, Centre Place and Hardware Lane all hide some of the best coffee in the country.</p>",
                featured_image="https://images.unsplash.com/photo-1514395462725-fb4566210144",
                category_id=food.id,
                tags=[tags["Coffee"].id],
                published=True,
            ), author_id=admin.id if admin else None),
            blog.create_post(PostCreate(
                title="Snorkelling the Great Barrier Reef from Cairns",
                excerpt="Choosing a reef tour that suits your budget and swimming ability.",
                content="<p>Outer reef trips from Cairns reach Agincourt and Flynn reefs in about ninety minutes.</p>",
                featured_image="https://images.unsplash.com/photo-1582967788606-a171c1080cb0",
                category_id=outdoors.id,
                tags=[tags["Reef"].id],
                published=True,
            ), author_id=admin.id if admin else None),
            blog.create_post(PostCreate(
                title="Driving the Great Ocean Road",
                excerpt="A three day itinerary from Torquay to the Twelve Apostles.",
                content="<p>Draft itinerary, still collecting stops between Apollo Bay and Port Campbell.</p>",
                category_id=guides.id,
                tags=[tags["Road Trip"].id],
            ), author_id=admin.id if admin else None),
        ]

        print("Seeding directory...")
        stays = directory.create_category(TermCreate(name="Accommodation", description="Hotels, hostels and holiday rentals."))
        eats = directory.create_category(TermCreate(name="Restaurants & Cafes", description="Places to eat and drink."))
        tours = directory.create_category(TermCreate(name="Tours & Activities", description="Guided tours and things to do."))

        listings = [
            directory.create_listing(ListingCreate(
                name="Bondi Beach House",
                category_id=stays.id,
                description="Boutique guesthouse two streets back from Bondi Beach.",
                location="Sydney",
                address="12 Campbell Parade, Bondi Beach NSW 2026",
                latitude=-33.8908,
                longitude=151.2743,
                website="https://example.com/bondi-beach-house",
                price_range="$$$",
                featured=True,
            )),
            directory.create_listing(ListingCreate(
                name="Degraves Espresso",
                category_id=eats.id,
                description="Tiny laneway espresso bar serving single origin beans.",
                location="Melbourne",
                address="23 Degraves St, Melbourne VIC 3000",
                price_range="$",
                hours={"monday": "7am - 4pm", "saturday": "8am - 3pm"},
                featured=True,
            )),
            directory.create_listing(ListingCreate(
                name="Outer Reef Explorer",
                category_id=tours.id,
                description="Full day snorkel and dive trips to the outer Great Barrier Reef.",
                location="Cairns",
                address="Reef Fleet Terminal, Cairns QLD 4870",
                phone="+61 7 4000 0000",
                price_range="$$",
            )),
        ]

        integration = IntegrationService(session)
        for post, listing in zip(posts, listings):
            integration.link(post.id, listing.id)

        print(f"Successfully seeded {len(posts)} posts and {len(listings)} listings!")


if __name__ == "__main__":
    seed_content()
