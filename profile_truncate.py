#!/usr/bin/env python3
"""Profile htmlsnip to find performance bottlenecks."""

import cProfile
import io
import pstats

from htmlsnip import truncate

# Sample HTML
html = """
<div class="container">
    <h1>Quarterly report &amp; outlook</h1>
    <p>Paragraph 1 with <a href="/more">a link</a> and caf&eacute; text.</p>
    <!-- editorial note -->
    <p>Paragraph 2<br>with a line break and <img src="chart.png" alt="chart"></p>
    <ul><li>First item<li>Second item<li>Third item</ul>
    <table>
        <tr><td>Cell 1</td><td>Cell 2</td></tr>
        <tr><td>Cell 3</td><td>Cell 4</td></tr>
    </table>
</div>
""" * 100  # Repeat for more meaningful results

# Profile
pr = cProfile.Profile()
pr.enable()

for length in (50, 5000, len(html)):
    for _ in range(10):
        truncate(html, length, "...")
        truncate(html, length, break_words=False, suffix="...", enclose_suffix_in_tags=True)

pr.disable()

# Print stats
s = io.StringIO()
ps = pstats.Stats(pr, stream=s).sort_stats("cumulative")
ps.print_stats(50)  # Top 50 functions
print(s.getvalue())
