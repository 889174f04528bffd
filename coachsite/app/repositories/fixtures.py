"""In-memory demo dataset shown when live content is unavailable."""
from __future__ import annotations

import copy

from coachsite.app.repositories.base import Record

AUTHOR = "Lillian Adegbola"


def _image(photo_id: str) -> str:
    return (
        f"https://images.unsplash.com/{photo_id}"
        "?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&q=80"
    )


DEMO_BLOG_POSTS: tuple[Record, ...] = (
    {
        "id": 1,
        "title": "The Fearless Leader: Embracing Authentic Leadership in Uncertain Times",
        "slug": "fearless-leader-authentic-leadership",
        "excerpt": (
            "Discover how authentic leadership becomes your superpower during challenging "
            "times. Learn the 5 key principles that separate fearless leaders from the rest."
        ),
        "content": (
            "# The Fearless Leader: Embracing Authentic Leadership in Uncertain Times\n\n"
            "In today's rapidly changing world, the old models of leadership are crumbling. "
            "Command-and-control hierarchies are giving way to more collaborative, authentic "
            "approaches that inspire rather than intimidate.\n\n"
            "## What Makes a Fearless Leader?\n\n"
            "Fearless leadership isn't about the absence of fear. It's about moving forward "
            "despite it.\n\n"
            "### 1. Authentic Self-Expression\n\n"
            "Fearless leaders show up as their genuine selves.\n\n"
            "### 2. Vulnerability as Strength\n\n"
            "The most powerful leaders understand that vulnerability is **courage**.\n\n"
            "*Are you ready to step into fearless leadership?*"
        ),
        "category": "leadership",
        "author": AUTHOR,
        "featured_image": _image("photo-1559136555-9303baea8ebd"),
        "is_featured": True,
        "is_published": True,
        "read_time": "8 min read",
        "views": 1247,
        "created_at": "2024-01-15T10:00:00",
    },
    {
        "id": 2,
        "title": "Clarity Over Chaos: Your 30-Day Guide to Purpose-Driven Living",
        "slug": "clarity-over-chaos-purpose-driven-living",
        "excerpt": (
            "Transform confusion into clarity with this comprehensive guide. Step-by-step "
            "strategies to align your actions with your authentic purpose."
        ),
        "content": (
            "# Clarity Over Chaos: Your 30-Day Guide to Purpose-Driven Living\n\n"
            "Clarity isn't something you find. It's something you create.\n\n"
            "## The Clarity Framework\n\n"
            "- Values alignment\n"
            "- Vision creation\n\n"
            "*Your purpose-driven life is waiting for you to claim it.*"
        ),
        "category": "transformation",
        "author": AUTHOR,
        "featured_image": _image("photo-1506905925346-21bda4d32df4"),
        "is_featured": True,
        "is_published": True,
        "read_time": "12 min read",
        "views": 892,
        "created_at": "2024-01-08T10:00:00",
    },
    {
        "id": 3,
        "title": "The Executive Coaching Revolution: Why Traditional Methods Fall Short",
        "slug": "executive-coaching-revolution",
        "excerpt": (
            "Explore the evolution of executive coaching and why breakthrough results require "
            "breakthrough approaches. The future of leadership development is here."
        ),
        "content": (
            "# The Executive Coaching Revolution: Why Traditional Methods Fall Short\n\n"
            "The executive coaching industry is at a crossroads.\n\n"
            "## The Revolutionary Approach\n\n"
            "Revolutionary coaching addresses the leader as a complete human being."
        ),
        "category": "coaching",
        "author": AUTHOR,
        "featured_image": _image("photo-1552664730-d307ca884978"),
        "is_featured": False,
        "is_published": True,
        "read_time": "6 min read",
        "views": 654,
        "created_at": "2024-01-01T10:00:00",
    },
    {
        "id": 4,
        "title": "Building Resilient Teams: The Leadership Blueprint for 2024",
        "slug": "building-resilient-teams",
        "excerpt": (
            "Learn the essential strategies for creating teams that thrive under pressure and "
            "adapt to change with confidence and clarity."
        ),
        "content": (
            "# Building Resilient Teams: The Leadership Blueprint for 2024\n\n"
            "Team resilience isn't just nice to have. It's essential.\n\n"
            "## The 5 Pillars of Team Resilience\n\n"
            "Building resilient teams requires intentional effort and consistent practice."
        ),
        "category": "leadership",
        "author": AUTHOR,
        "featured_image": _image("photo-1522071820081-009f0129c71c"),
        "is_featured": False,
        "is_published": True,
        "read_time": "10 min read",
        "views": 1156,
        "created_at": "2023-12-20T10:00:00",
    },
    {
        "id": 5,
        "title": "From Burnout to Breakthrough: A Personal Transformation Story",
        "slug": "burnout-to-breakthrough",
        "excerpt": (
            "A vulnerable look at overcoming burnout and finding renewed purpose. Real "
            "strategies that work when everything feels overwhelming."
        ),
        "content": (
            "# From Burnout to Breakthrough: A Personal Transformation Story\n\n"
            "Burnout isn't just being tired. It's a disconnection from your purpose.\n\n"
            "## The Journey Back\n\n"
            "Recovery requires both practical strategies and inner work."
        ),
        "category": "transformation",
        "author": AUTHOR,
        "featured_image": _image("photo-1499209974431-9dddcece7f88"),
        "is_featured": False,
        "is_published": True,
        "read_time": "7 min read",
        "views": 2341,
        "created_at": "2023-12-15T10:00:00",
    },
    {
        "id": 6,
        "title": "The Art of Powerful Conversations: Coaching Techniques for Leaders",
        "slug": "art-of-powerful-conversations",
        "excerpt": (
            "Master the conversation skills that transform relationships and accelerate "
            "results. Essential techniques every leader needs to know."
        ),
        "content": (
            "# The Art of Powerful Conversations: Coaching Techniques for Leaders\n\n"
            "Great leaders ask the right questions, listen deeply, and guide others to their "
            "own insights.\n\n"
            "## The Conversation Framework\n\n"
            "Every powerful conversation has structure and intention."
        ),
        "category": "coaching",
        "author": AUTHOR,
        "featured_image": _image("photo-1573496359142-b8d87734a5a2"),
        "is_featured": False,
        "is_published": True,
        "read_time": "9 min read",
        "views": 743,
        "created_at": "2023-12-08T10:00:00",
    },
)

DEMO_TESTIMONIALS: tuple[Record, ...] = (
    {
        "id": 1,
        "name": "Chioma Adebayo",
        "title": "CEO, TechVision Solutions",
        "content": (
            "Lillian transformed my leadership approach completely. Her clarity and insight "
            "helped me navigate complex challenges and achieve results I never thought possible."
        ),
        "rating": 5,
        "image_url": "/images/testimonials/chioma.png",
        "is_published": True,
    },
    {
        "id": 2,
        "name": "Tunde Bakare",
        "title": "Executive Director, Global Impact Foundation",
        "content": (
            "Working with Lillian was a game-changer for our organization. Her strategic "
            "guidance helped us scale our impact by 300% in just one year."
        ),
        "rating": 5,
        "image_url": "/images/testimonials/tunde.png",
        "is_published": True,
    },
    {
        "id": 3,
        "name": "Dr. Ngozi Eze",
        "title": "Founder, MedInnovate",
        "content": (
            "Lillian's coaching gave me the confidence to launch my healthcare startup. Her "
            "authentic approach helped me become the leader I always knew I could be."
        ),
        "rating": 5,
        "image_url": "/images/testimonials/ngozi.png",
        "is_published": True,
    },
    {
        "id": 4,
        "name": "Emeka Okafor",
        "title": "VP of Operations, Fortune 500 Company",
        "content": (
            "The transformation I experienced through Lillian's coaching was profound. She "
            "helped me find my authentic leadership voice."
        ),
        "rating": 5,
        "image_url": "/images/testimonials/emeka.png",
        "is_published": True,
    },
)

DEMO_RESOURCES: tuple[Record, ...] = (
    {
        "id": 1,
        "title": "Leadership Clarity Workbook",
        "description": "A guided workbook for defining your leadership values and vision.",
        "category": "leadership",
        "type": "PDF",
        "size": "2.4 MB",
        "url": None,
        "image": None,
        "downloads": 0,
        "premium": False,
    },
)


class FixtureContentRepository:
    """Serves copies of the demo dataset; view counts are not tracked."""

    def list_blog_posts(self, limit: int | None = None) -> list[Record]:
        posts = copy.deepcopy(list(DEMO_BLOG_POSTS))
        return posts[:limit] if limit else posts

    def get_blog_post(self, slug: str) -> Record | None:
        for post in DEMO_BLOG_POSTS:
            if post["slug"] == slug:
                return copy.deepcopy(post)
        return None

    def record_post_view(self, slug: str) -> None:
        return None

    def list_testimonials(self, limit: int | None = None) -> list[Record]:
        testimonials = copy.deepcopy(list(DEMO_TESTIMONIALS))
        return testimonials[:limit] if limit else testimonials

    def list_resources(self) -> list[Record]:
        return copy.deepcopy(list(DEMO_RESOURCES))
