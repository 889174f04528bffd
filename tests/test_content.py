from __future__ import annotations

import unittest

from markupsafe import Markup

from coachsite.app.services.content import (
    category_counts,
    filter_posts,
    generate_slug,
    render_post_content,
)

POSTS = [
    {"title": "Lead Boldly", "excerpt": "Courage first.", "category": "leadership",
     "views": 10, "created_at": "2024-01-10T09:00:00"},
    {"title": "Coaching Basics", "excerpt": "Ask better questions.", "category": "coaching",
     "views": 50, "created_at": "2024-02-01T09:00:00"},
    {"title": "Reinvention", "excerpt": "A leadership story.", "category": "transformation",
     "views": 5, "created_at": "2023-11-20T09:00:00"},
]


class SlugTestCase(unittest.TestCase):
    def test_generate_slug(self) -> None:
        self.assertEqual(generate_slug("Hello, World!  Again--now"), "hello-world-again-now")
        self.assertEqual(generate_slug("  5 Habits of Clear Leaders "), "5-habits-of-clear-leaders")
        self.assertEqual(generate_slug("!!!"), "")


class FilterPostsTestCase(unittest.TestCase):
    def test_defaults_to_newest_first(self) -> None:
        titles = [post["title"] for post in filter_posts(POSTS)]
        self.assertEqual(titles, ["Coaching Basics", "Lead Boldly", "Reinvention"])

    def test_category_and_search(self) -> None:
        self.assertEqual(len(filter_posts(POSTS, category="all")), 3)
        self.assertEqual(
            [post["title"] for post in filter_posts(POSTS, category="coaching")],
            ["Coaching Basics"],
        )
        # Search looks at excerpts as well as titles.
        self.assertEqual(
            [post["title"] for post in filter_posts(POSTS, search="LEADERSHIP")],
            ["Reinvention"],
        )

    def test_popular_and_oldest(self) -> None:
        self.assertEqual(filter_posts(POSTS, sort="popular")[0]["views"], 50)
        self.assertEqual(filter_posts(POSTS, sort="oldest")[0]["title"], "Reinvention")

    def test_unknown_sort(self) -> None:
        with self.assertRaises(ValueError):
            filter_posts(POSTS, sort="alphabetical")

    def test_category_counts(self) -> None:
        counts = category_counts(POSTS)
        self.assertEqual(counts["all"], 3)
        self.assertEqual(counts["leadership"], 1)
        self.assertEqual(counts["business"], 0)


class RenderContentTestCase(unittest.TestCase):
    def test_markup(self) -> None:
        html = render_post_content(
            "# Title\n\n## Section\n\nSome **bold** and *soft* words.\nSecond line.\n\n"
            "- one\n- two\n\n1. first\n2. second"
        )

        self.assertIsInstance(html, Markup)
        self.assertIn("<h1>Title</h1>", html)
        self.assertIn("<h2>Section</h2>", html)
        self.assertIn(
            "<p>Some <strong>bold</strong> and <em>soft</em> words.<br>Second line.</p>", html
        )
        self.assertIn("<li>one</li>\n<li>two</li>", html)
        self.assertIn("<li>1. first</li>\n<li>2. second</li>", html)

    def test_list_lines_inside_a_paragraph_block(self) -> None:
        html = render_post_content("Steps to try:\n1. Pause\n2. Reflect\nThen decide.")

        self.assertEqual(
            html,
            "<p>Steps to try:</p>\n<li>1. Pause</li>\n<li>2. Reflect</li>\n<p>Then decide.</p>",
        )
        self.assertNotIn("<br><li>", html)

    def test_escapes_html(self) -> None:
        html = render_post_content("<script>alert(1)</script> & **more**")

        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)
        self.assertIn("&amp; <strong>more</strong>", html)

    def test_empty(self) -> None:
        self.assertEqual(render_post_content(None), "")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
