# api/index.py

from http.server import BaseHTTPRequestHandler

HTML = """<!DOCTYPE html>
<html><head>
<meta charset=\"utf-8\"><title>AniList SVG Cards</title>
<style>
body { font-family: system-ui, sans-serif; background: #23272e; color: #abb2bf; max-width: 820px; margin: 40px auto; padding: 20px; }
a { color: #49ACD2; } code { background: #2c313a; padding: 2px 6px; border-radius: 4px; }
pre { background: #1e2127; padding: 16px; border-radius: 6px; overflow-x: auto; }
h1 { border-bottom: 1px solid #3e4451; padding-bottom: 10px; }
.endpoint { margin: 20px 0; padding: 16px; background: #1e2127; border-radius: 6px; border-left: 3px solid #49ACD2; }
</style>
</head><body>
<h1>AniList SVG Cards API</h1>
<p>SVG cards for AniList anime lists. Embed in READMEs or anywhere that renders images.</p>

<div class=\"endpoint\">
<h3>GET <code>/api/animelist</code></h3>
<p>Watching, Completed and Planning lists with inlined posters.</p>
<pre>?username=kenndeclouv
&amp;layout=list|grid|compact-row
&amp;title=My%20Anime
&amp;bgColor=23272e&amp;primaryColor=49ACD2&amp;accentColor=49ACD2
&amp;sectionBg=23272e&amp;posterBg=49ACD2&amp;textColor=abb2bf
&amp;width=560&amp;rowHeight=56&amp;headerHeight=38&amp;headerFontSize=18
&amp;titleFontSize=28&amp;titleMargin=32&amp;sectionGap=18&amp;maxRows=5
&amp;gridColumns=2&amp;gridCardHeight=240</pre>
<p>Colors may be given with or without <code>#</code>, as <code>%23</code>, or as named / <code>rgb()</code> / <code>hsl()</code> values.</p>
</div>

<div class=\"endpoint\">
<h3>GET <code>/api/activity</code></h3>
<p>Most recent activity as JSON.</p>
<pre>?username=kenndeclouv&amp;perPage=5</pre>
</div>

<h3>Example</h3>
<pre>&lt;img src=\"https://your-domain.vercel.app/api/animelist?username=kenndeclouv&amp;layout=grid\" /&gt;</pre>
</body></html>"""

class handler(BaseHTTPRequestHandler):
    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.end_headers()
        self.wfile.write(HTML.encode())
