# sitestore/publisher.py
"""
Static HTML for the blog: one page per published post under blog/, and a
listing page (blog.html) re-rendered from the published posts whenever
the set changes. Rendering depends only on the post records.
"""
import os
from typing import Any, Dict, List
from bs4 import BeautifulSoup
from jinja2 import DictLoader, Environment, select_autoescape
from sitestore.identifiers import safe_path
from sitestore.timeutil import display_date, parse_instant

POST_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ post.title }}</title>
  <meta name="description" content="{{ post.excerpt }}">
  <link rel="stylesheet" href="../styles.css">
</head>
<body>
  <article class="blog-post" data-post-id="{{ post.slug }}">
    <a class="back-link" href="../blog.html">&larr; All posts</a>
    <header>
      {% if post.category %}<span class="blog-category">{{ post.category }}</span>{% endif %}
      <h1>{{ post.title }}</h1>
      <p class="blog-meta">
        {% if post.author %}<span class="blog-author">{{ post.author }}</span> &middot; {% endif %}
        {% if published %}<time datetime="{{ post.publishedAt }}">{{ published }}</time> &middot; {% endif %}
        <span class="blog-read-time">{{ post.readTime }}</span>
      </p>
      {% if post.heroImage %}<img class="blog-hero" src="{{ post.heroImage }}" alt="{{ post.title }}">{% endif %}
    </header>
    <div class="blog-content">
{{ post.content | safe }}
    </div>
  </article>
  <section class="comments" id="comments">
    <h2>Comments</h2>
    <form id="comment-form">
      <input name="name" placeholder="Your name" maxlength="100" required>
      <textarea name="text" placeholder="Leave a comment" maxlength="2000" required></textarea>
      <button type="submit">Post comment</button>
    </form>
    <ul id="comment-list"></ul>
  </section>
  <script>
    const POST_ID = {{ post.slug | tojson }};
    const list = document.getElementById('comment-list');
    function show(comments) {
      list.innerHTML = '';
      comments.forEach(c => {
        const li = document.createElement('li');
        const who = document.createElement('strong');
        who.textContent = c.name + ' · ' + c.date;
        const body = document.createElement('p');
        body.textContent = c.text;
        li.append(who, body);
        list.appendChild(li);
      });
    }
    function load() {
      fetch('/api/comments/' + encodeURIComponent(POST_ID))
        .then(r => r.json()).then(d => show(d.comments || []));
    }
    document.getElementById('comment-form').addEventListener('submit', e => {
      e.preventDefault();
      const form = new FormData(e.target);
      fetch('/api/comments/' + encodeURIComponent(POST_ID), {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify({name: form.get('name'), text: form.get('text')})
      }).then(() => { e.target.reset(); load(); });
    });
    load();
  </script>
</body>
</html>
"""

LISTING_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title }}</title>
  <link rel="stylesheet" href="styles.css">
</head>
<body>
  <main>
    <h1>{{ title }}</h1>
    <div class="blog-grid" id="blog-grid">
{% for post in posts %}
      <article class="blog-card" data-slug="{{ post.slug }}">
        {% if post.heroImage %}<img src="{{ post.heroImage }}" alt="{{ post.title }}">{% endif %}
        {% if post.category %}<span class="blog-category">{{ post.category }}</span>{% endif %}
        <h2><a href="blog/{{ post.slug }}.html">{{ post.title }}</a></h2>
        <p>{{ post.excerpt }}</p>
        <span class="blog-read-time">{{ post.readTime }}</span>
      </article>
{% else %}
      <p class="blog-empty">No posts yet.</p>
{% endfor %}
    </div>
  </main>
</body>
</html>
"""

_env = Environment(
    loader=DictLoader({"post.html": POST_TEMPLATE, "listing.html": LISTING_TEMPLATE}),
    autoescape=select_autoescape(default=True),
)


def _published_label(post: Dict[str, Any]) -> str:
    dt = parse_instant(post.get("publishedAt"))
    return display_date(dt) if dt else ""


class BlogPublisher:
    def __init__(self, pages_dir: str, listing_path: str, listing_title: str = "Blog"):
        self.pages_dir = pages_dir
        self.listing_path = listing_path
        self.listing_title = listing_title

    def page_path(self, slug: str) -> str:
        return safe_path(self.pages_dir, slug, ".html", what="slug")

    def render(self, post: Dict[str, Any]) -> str:
        return _env.get_template("post.html").render(post=post, published=_published_label(post))

    def write_page(self, post: Dict[str, Any]) -> str:
        path = self.page_path(post["slug"])
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render(post))
        return path

    def remove_page(self, slug: str) -> bool:
        path = self.page_path(slug)
        if not os.path.exists(path):
            return False
        os.remove(path)
        return True

    def has_page(self, slug: str) -> bool:
        return os.path.isfile(self.page_path(slug))

    def render_listing(self, posts: List[Dict[str, Any]]) -> str:
        return _env.get_template("listing.html").render(title=self.listing_title, posts=posts)

    def write_listing(self, posts: List[Dict[str, Any]]) -> None:
        with open(self.listing_path, "w", encoding="utf-8") as f:
            f.write(self.render_listing(posts))

    def listing_slugs(self) -> List[str]:
        if not os.path.exists(self.listing_path):
            return []
        with open(self.listing_path, "r", encoding="utf-8") as f:
            soup = BeautifulSoup(f.read(), "html.parser")
        return [card.get("data-slug") for card in soup.select("article.blog-card[data-slug]")]

    def has_listing_card(self, slug: str) -> bool:
        return slug in self.listing_slugs()
