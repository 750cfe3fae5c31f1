"""
Quick demo script to run the TagAssist API locally.

This script starts a local server and shows how to make requests to the endpoints.
"""

import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting TagAssist Backend Demo")
    print("=" * 60)
    print()
    print("📌 API Endpoints:")
    print("   - Health Check:   GET    http://localhost:8000/health")
    print("   - Submit Work:    POST   http://localhost:8000/works")
    print("   - Report:         GET    http://localhost:8000/works/{work_id}/recommendations/report")
    print("   - Delete:         DELETE http://localhost:8000/works/{work_id}/recommendations")
    print("   - API Docs:              http://localhost:8000/docs")
    print()
    print("📝 Test with curl:")
    print('   curl -X POST "http://localhost:8000/works" \\')
    print('     -H "Content-Type: application/json" \\')
    print('     -d \'{"title": "My Fic", "body": "Once upon a time...", "author_tags": ["Fluff"]}\'')
    print()
    print("=" * 60)
    print("Starting server on http://localhost:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "tagassist.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
