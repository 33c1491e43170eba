"""Routing - an ordered route table scanned first-match-wins.

Routes are appended during setup and never reordered; each path
template is compiled once when its route is registered.
"""
