"""Populate a development database with categories, tags, posts, comments and likes."""
import asyncio
import argparse
import random
import time
from blog_api.database import engine, async_session, Base
from blog_api.repositories.blog_repository import BlogRepository
from blog_api.schemas import BlogCreate
from blog_api.services import taxonomy_service

CATEGORIES = ["engineering", "product", "design", "culture", "tutorials"]

TAGS = ["python", "fastapi", "postgresql", "docker", "kubernetes",
        "react", "typescript", "aws", "devops", "testing", "performance",
        "security", "microservices", "graphql", "rest-api"]

async def seed(small: bool = False, reset: bool = False):
    num_authors = 5 if small else 25
    num_posts = 50 if small else 2000
    max_comments = 2 if small else 5

    print(f"Seeding: {num_authors} authors, {num_posts} posts, up to {max_comments} comments each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    authors = [f"user-{i:04d}" for i in range(num_authors)]

    async with async_session() as session:
        categories = [await taxonomy_service.create_category(session, name) for name in CATEGORIES]
        tags = [await taxonomy_service.create_tag(session, name) for name in TAGS]
        print(f"  Created {len(categories)} categories, {len(tags)} tags")

        repo = BlogRepository(session)
        total_comments = total_likes = 0
        for i in range(num_posts):
            topic = random.choice(TAGS)
            blog = await repo.create(BlogCreate(
                title=f"Post {i}: Shipping {topic} to production",
                content=f"This is the full content of post {i} about {topic}. " * 20,
                author=random.choice(authors),
                categories=[c["id"] for c in random.sample(categories, k=random.randint(1, 2))],
                tags=[t["id"] for t in random.sample(tags, k=random.randint(1, 4))],
            ))
            for _ in range(random.randint(0, max_comments)):
                await repo.add_comment(blog.id, random.choice(authors), "Great post, very helpful.")
                total_comments += 1
            for user in random.sample(authors, k=random.randint(0, len(authors) // 2)):
                await repo.add_like(blog.id, user)
                total_likes += 1

            if (i + 1) % 500 == 0:
                await session.commit()
                print(f"  {i + 1} posts created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Posts: {num_posts}")
    print(f"  Comments: {total_comments}")
    print(f"  Likes: {total_likes}")


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (50 posts)")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, reset=args.reset))


if __name__ == "__main__":
    main()
