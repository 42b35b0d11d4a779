"""
SportAI chat relay: a streaming proxy to the AI gateway and the client-side
consumer that assembles streamed replies into a live transcript.
"""
