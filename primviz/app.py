import logging
import math
import tkinter as tk
from tkinter import messagebox, simpledialog, ttk
from typing import Dict, Optional, Set, Tuple

from .errors import MstError
from .graph_model import Edge, Node
from .playback import DEFAULT_DELAY_MS, PlaybackListener, PlaybackState
from .session import GraphSession, InteractionMode

logger = logging.getLogger(__name__)


class ConsoleHandler(logging.Handler):
	"""Mirrors log records into the window's console pane."""

	def __init__(self, text: tk.Text) -> None:
		super().__init__(level=logging.INFO)
		self.text = text

	def emit(self, record: logging.LogRecord) -> None:
		msg = self.format(record)
		self.text.configure(state=tk.NORMAL)
		self.text.insert(tk.END, f"• {msg}\n")
		self.text.see(tk.END)
		self.text.configure(state=tk.DISABLED)


class PrimVisualizer(PlaybackListener):
	RADIUS = 16
	EDGE_HIT_DISTANCE = 6
	COLOR_BG = "#111927"
	COLOR_CANVAS = "#0b1220"
	COLOR_NODE = "#f59e0b"  # amber for visited nodes
	COLOR_NODE_IDLE = "#94a3b8"
	COLOR_NODE_SOURCE = "#a855f7"  # purple
	COLOR_NODE_WARN = "#ef4444"  # unreachable / selected
	COLOR_EDGE = "#64748b"
	COLOR_EDGE_CURRENT = "#3b82f6"  # blue
	COLOR_EDGE_REJECT = "#ef4444"  # red
	COLOR_EDGE_MST = "#10b981"  # green
	COLOR_EDGE_FADED = "#1f2937"
	COLOR_TEXT = "#e5e7eb"

	def __init__(self, root: tk.Tk, delay_ms: int = DEFAULT_DELAY_MS) -> None:
		self.root = root
		self.root.title("Prim's MST Visualizer")
		self.root.configure(bg=self.COLOR_BG)
		self.session = GraphSession(root, self, delay_ms)

		self.canvas = tk.Canvas(self.root, width=900, height=600, bg=self.COLOR_CANVAS, highlightthickness=0)
		self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

		self.sidebar = tk.Frame(self.root, bg=self.COLOR_BG)
		self.sidebar.pack(side=tk.RIGHT, fill=tk.Y)

		for text, mode in (
			("Add Node", InteractionMode.ADD_NODE),
			("Add Edge", InteractionMode.ADD_EDGE),
			("Remove Node", InteractionMode.REMOVE_NODE),
			("Remove Edge", InteractionMode.REMOVE_EDGE),
		):
			tk.Button(self.sidebar, text=text, command=lambda m=mode: self.set_mode(m)).pack(pady=4, padx=12, fill=tk.X)
		tk.Button(self.sidebar, text="Clear Graph", command=self.clear_graph).pack(pady=4, padx=12, fill=tk.X)

		tk.Label(self.sidebar, text="Source node", fg=self.COLOR_TEXT, bg=self.COLOR_BG, anchor="w").pack(fill=tk.X, padx=12, pady=(12, 0))
		self.source_var = tk.StringVar()
		self.source_box = ttk.Combobox(self.sidebar, textvariable=self.source_var, state="readonly", postcommand=self.update_source_options)
		self.source_box.pack(padx=12, fill=tk.X)
		self.source_box.bind("<<ComboboxSelected>>", self.on_source_selected)

		tk.Label(self.sidebar, text="Animation delay (ms)", fg=self.COLOR_TEXT, bg=self.COLOR_BG, anchor="w").pack(fill=tk.X, padx=12, pady=(12, 0))
		self.delay_scale = tk.Scale(self.sidebar, from_=100, to=2000, resolution=50, orient=tk.HORIZONTAL, command=self.on_delay_changed, bg=self.COLOR_BG, fg=self.COLOR_TEXT, highlightthickness=0)
		self.delay_scale.set(delay_ms)
		self.delay_scale.pack(padx=12, fill=tk.X)

		self.btn_run = tk.Button(self.sidebar, text="Run Prim's MST", command=self.run_prim, state=tk.DISABLED)
		self.btn_run.pack(pady=(12, 4), padx=12, fill=tk.X)
		tk.Button(self.sidebar, text="Cancel", command=self.cancel_run).pack(pady=4, padx=12, fill=tk.X)
		tk.Button(self.sidebar, text="Remove Non-MST Edges", command=self.prune_edges).pack(pady=4, padx=12, fill=tk.X)

		self.cost_var = tk.StringVar(value=self.session.total_cost_text())
		tk.Label(self.sidebar, textvariable=self.cost_var, fg=self.COLOR_TEXT, bg=self.COLOR_BG, anchor="w", padx=12, font=("Segoe UI", 11, "bold")).pack(fill=tk.X, pady=12)

		self.console = tk.Text(self.sidebar, width=42, height=14, bg=self.COLOR_CANVAS, fg=self.COLOR_TEXT, state=tk.DISABLED, wrap=tk.WORD)
		self.console.pack(padx=12, pady=(0, 12), fill=tk.BOTH, expand=True)
		self.console_handler = ConsoleHandler(self.console)
		self.console_handler.setFormatter(logging.Formatter("%(message)s"))
		logging.getLogger("primviz").addHandler(self.console_handler)

		self.node_items: Dict[str, Tuple[int, int]] = {}  # oval_id, text_id
		self.edge_items: Dict[int, Tuple[int, int]] = {}  # id(edge) -> line_id, text_id
		self.edges_by_line: Dict[int, Edge] = {}
		self.highlighted_nodes: Set[str] = set()
		self.dragging: Optional[str] = None

		self.canvas.bind("<Button-1>", self.on_canvas_click)
		self.canvas.bind("<B1-Motion>", self.on_canvas_drag)
		self.canvas.bind("<ButtonRelease-1>", lambda e: setattr(self, "dragging", None))

	# --- Modes and clicks ---

	def set_mode(self, mode: InteractionMode) -> None:
		self.clear_selection()
		self.session.set_mode(mode)

	def on_canvas_click(self, event: tk.Event) -> None:
		if self.session.controller.state is PlaybackState.RUNNING:
			return
		mode = self.session.mode
		label = self.find_node_at(event.x, event.y)
		try:
			if label is None:
				if mode is InteractionMode.ADD_NODE:
					self.session.add_node((event.x, event.y))
				elif mode is InteractionMode.REMOVE_EDGE:
					edge = self.find_edge_at(event.x, event.y)
					if edge is not None:
						self.session.remove_edge(edge.edge_id)
			elif mode is InteractionMode.IDLE:
				self.dragging = label
			else:
				self.handle_node_click(label)
		except MstError as exc:
			messagebox.showerror(exc.kind, exc.message)
		self.refresh()

	def handle_node_click(self, label: str) -> None:
		pair = self.session.pick_node(label)
		if self.session.edge_start is not None:
			self.mark_node(label, self.COLOR_NODE_WARN)
			self.highlighted_nodes.add(label)
			return
		if pair is None:
			return
		self.clear_selection()
		edge = self.session.connect(pair[0], pair[1], self.prompt_weight)
		if edge is not None:
			logger.info("Add more edges or run the visualization.")

	def on_canvas_drag(self, event: tk.Event) -> None:
		if self.dragging is None or self.session.controller.state is PlaybackState.RUNNING:
			return
		self.session.move_node(self.dragging, (event.x, event.y))
		self.refresh()

	def prompt_weight(self, u: str, v: str) -> Optional[float]:
		try:
			w_str = simpledialog.askstring("Edge weight", f"Enter weight for edge ({u}, {v}):", parent=self.root)
			if w_str is None:
				return None
			w = float(w_str)
			if not math.isfinite(w) or w <= 0:
				messagebox.showerror("Invalid weight", "Weight must be a positive number.")
				return None
			return w
		except ValueError:
			messagebox.showerror("Invalid input", "Please enter a numeric weight.")
			return None

	def find_node_at(self, x: float, y: float) -> Optional[str]:
		for node in self.session.graph.nodes:
			vx, vy = node.position
			if (vx - x) ** 2 + (vy - y) ** 2 <= self.RADIUS ** 2:
				return node.label
		return None

	def find_edge_at(self, x: float, y: float) -> Optional[Edge]:
		near = self.canvas.find_overlapping(x - self.EDGE_HIT_DISTANCE, y - self.EDGE_HIT_DISTANCE, x + self.EDGE_HIT_DISTANCE, y + self.EDGE_HIT_DISTANCE)
		for item in near:
			if item in self.edges_by_line:
				return self.edges_by_line[item]
		return None

	# --- Drawing ---

	def refresh(self) -> None:
		"""Turn the model's pending changes into canvas calls."""
		for change in self.session.drain_changes():
			if change.kind == "node_added":
				self.draw_node(change.node)
			elif change.kind == "node_removed":
				for item in self.node_items.pop(change.node.label, ()):
					self.canvas.delete(item)
			elif change.kind == "node_moved":
				self.move_node_items(change.node)
			elif change.kind == "edge_added":
				self.draw_edge(change.edge)
			elif change.kind == "edge_removed":
				for item in self.edge_items.pop(id(change.edge), ()):
					self.edges_by_line.pop(item, None)
					self.canvas.delete(item)
			elif change.kind == "source_changed":
				self.mark_node(change.node.label, self.node_color(change.node))
			elif change.kind == "cleared":
				self.canvas.delete("all")
				self.node_items.clear()
				self.edge_items.clear()
				self.edges_by_line.clear()
		self.update_source_options()
		self.update_run_button()
		self.cost_var.set(self.session.total_cost_text())

	def draw_node(self, node: Node) -> None:
		x, y = node.position
		oval = self.canvas.create_oval(
			x - self.RADIUS,
			y - self.RADIUS,
			x + self.RADIUS,
			y + self.RADIUS,
			fill=self.node_color(node),
			outline="#1f2937",
			width=2,
		)
		label = self.canvas.create_text(x, y, text=node.label, fill=self.COLOR_TEXT, font=("Segoe UI", 10, "bold"))
		self.node_items[node.label] = (oval, label)

	def move_node_items(self, node: Node) -> None:
		x, y = node.position
		oval, label = self.node_items[node.label]
		self.canvas.coords(oval, x - self.RADIUS, y - self.RADIUS, x + self.RADIUS, y + self.RADIUS)
		self.canvas.coords(label, x, y)
		for edge, _ in self.session.graph.neighbors(node.label):
			line, text = self.edge_items[id(edge)]
			(x1, y1), (x2, y2) = self.edge_coords(edge)
			self.canvas.coords(line, x1, y1, x2, y2)
			self.canvas.coords(text, (x1 + x2) / 2, (y1 + y2) / 2 - 10)

	def edge_coords(self, edge: Edge) -> Tuple[Tuple[float, float], Tuple[float, float]]:
		graph = self.session.graph
		return graph.get_node(edge.a).position, graph.get_node(edge.b).position

	def draw_edge(self, edge: Edge) -> None:
		(x1, y1), (x2, y2) = self.edge_coords(edge)
		line = self.canvas.create_line(x1, y1, x2, y2, fill=self.COLOR_EDGE, width=3)
		mx, my = (x1 + x2) / 2, (y1 + y2) / 2
		text = self.canvas.create_text(mx, my - 10, text=f"{edge.weight:g}", fill=self.COLOR_TEXT, font=("Segoe UI", 9))
		# Lines go under the nodes
		self.canvas.tag_lower(line)
		self.edge_items[id(edge)] = (line, text)
		self.edges_by_line[line] = edge

	def node_color(self, node: Node) -> str:
		return self.COLOR_NODE_SOURCE if node.is_source else self.COLOR_NODE_IDLE

	def mark_node(self, label: str, color: str) -> None:
		if label in self.node_items:
			self.canvas.itemconfig(self.node_items[label][0], fill=color)

	def color_edge(self, edge: Edge, color: str) -> None:
		if id(edge) in self.edge_items:
			self.canvas.itemconfig(self.edge_items[id(edge)][0], fill=color)

	def clear_selection(self) -> None:
		for label in self.highlighted_nodes:
			if self.session.graph.has_node(label):
				self.mark_node(label, self.node_color(self.session.graph.get_node(label)))
		self.highlighted_nodes.clear()

	def reset_colors(self) -> None:
		self.clear_selection()
		for edge in self.session.graph.edges:
			self.color_edge(edge, self.COLOR_EDGE)
		for node in self.session.graph.nodes:
			self.mark_node(node.label, self.node_color(node))

	def update_source_options(self) -> None:
		options = self.session.source_options()
		self.source_box["values"] = options
		if self.source_var.get() not in options:
			self.source_var.set("")

	def update_run_button(self) -> None:
		running = self.session.controller.state is PlaybackState.RUNNING
		enabled = self.session.is_runnable() and not running
		self.btn_run.configure(state=tk.NORMAL if enabled else tk.DISABLED)

	# --- Sidebar actions ---

	def on_source_selected(self, _event: tk.Event) -> None:
		if self.session.controller.state is PlaybackState.RUNNING:
			return
		self.session.select_source(self.source_var.get() or None)
		self.refresh()

	def on_delay_changed(self, value: str) -> None:
		self.session.set_delay(int(float(value)))

	def clear_graph(self) -> None:
		try:
			self.session.clear()
		except MstError as exc:
			messagebox.showerror(exc.kind, exc.message)
		self.highlighted_nodes.clear()
		self.refresh()

	def run_prim(self) -> None:
		self.reset_colors()
		self.session.start_mst(self.source_var.get() or None)
		self.update_run_button()

	def cancel_run(self) -> None:
		if self.session.cancel():
			self.update_run_button()

	def prune_edges(self) -> None:
		try:
			self.session.prune()
		except MstError as exc:
			messagebox.showerror(exc.kind, exc.message)
		self.refresh()

	# --- Playback callbacks ---

	def on_visit(self, node: Node) -> None:
		self.mark_node(node.label, self.COLOR_NODE)

	def on_consider(self, edge: Edge) -> None:
		self.color_edge(edge, self.COLOR_EDGE_CURRENT)

	def on_accept(self, edge: Edge, running_cost: float) -> None:
		self.color_edge(edge, self.COLOR_EDGE_MST)
		self.cost_var.set(self.session.total_cost_text())
		logger.info("Accepted %s - %s | MST total = %g", edge.a, edge.b, running_cost)

	def on_reject(self, edge: Edge) -> None:
		self.color_edge(edge, self.COLOR_EDGE_REJECT)

	def on_done(self, mst_edges: Set[Edge], final_cost: float) -> None:
		for edge in self.session.controller.non_mst_edges:
			self.color_edge(edge, self.COLOR_EDGE_FADED)
		self.cost_var.set(self.session.total_cost_text())
		self.update_run_button()

	def on_disconnected(self, unreachable: Set[str]) -> None:
		for label in unreachable:
			self.mark_node(label, self.COLOR_NODE_WARN)
			self.highlighted_nodes.add(label)

	def on_error(self, kind: str, message: str) -> None:
		messagebox.showerror(kind, message)


def main(delay_ms: int = DEFAULT_DELAY_MS) -> None:
	root = tk.Tk()
	app = PrimVisualizer(root, delay_ms)
	app.set_mode(InteractionMode.ADD_NODE)
	root.mainloop()
